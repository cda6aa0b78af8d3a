# ============================================================================
# CLAUDE CONTEXT - BACKEND REGISTRY
# ============================================================================
# STATUS: Adapter Layer - Backend lookup
# PURPOSE: Build every backend from AppConfig once and resolve them by name
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: BackendRegistry, build_backend_registry, get_backend_registry
# DEPENDENCIES: config, services.twitter_client, services.weather_client, util_logger
# PATTERNS: Singleton pattern for the registry
# ============================================================================
"""
Backend Registry.

Process-wide, read-only set of backend adapters built once at startup from
AppConfig. The service resolves backends by name and never branches on
route strings.
"""

from functools import lru_cache
from typing import Dict, List, Optional

from config import AppConfig, get_app_config
from ngsi_proxy.errors import ProxyError
from services.twitter_client import TwitterClient
from services.weather_client import WeatherClient
from util_logger import LoggerFactory, ComponentType, log_exceptions
from .base import BackendAdapter
from .random_backend import RandomBackend
from .static_backend import StaticBackend
from .twitter_backend import TwitterBackend
from .weather_backend import WeatherBackend

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "BackendRegistry")


class BackendRegistry:
    """Name -> BackendAdapter lookup."""

    def __init__(self, backends: Dict[str, BackendAdapter], default_entity_type: str = "Thing"):
        self._backends = dict(backends)
        self.default_entity_type = default_entity_type

    def get(self, name: str) -> BackendAdapter:
        backend = self._backends.get(name)
        if backend is None:
            raise ProxyError(f"Unknown backend '{name}'")
        return backend

    def names(self) -> List[str]:
        return list(self._backends)

    def describe(self) -> Dict[str, dict]:
        return {name: backend.describe() for name, backend in self._backends.items()}

    def close(self) -> None:
        for backend in self._backends.values():
            backend.close()


@log_exceptions(logger=logger)
def build_backend_registry(config: Optional[AppConfig] = None) -> BackendRegistry:
    """Create all four backends from configuration."""
    config = config or get_app_config()
    workers = config.fetch_max_workers

    twitter_client = TwitterClient(
        base_url=config.twitter_base_url,
        bearer_token=config.twitter_bearer_token,
        max_results=config.twitter_max_results,
        timeout=config.upstream_timeout_seconds
    )
    weather_client = WeatherClient(
        base_url=config.weather_base_url,
        api_key=config.weather_api_key,
        timeout=config.upstream_timeout_seconds
    )

    registry = BackendRegistry(
        {
            RandomBackend.name: RandomBackend(list_length=config.random_list_length, max_workers=workers),
            StaticBackend.name: StaticBackend.from_file(config.static_fixtures_path, max_workers=workers),
            TwitterBackend.name: TwitterBackend(twitter_client, max_workers=workers),
            WeatherBackend.name: WeatherBackend(weather_client, max_workers=workers),
        },
        default_entity_type=config.default_entity_type
    )

    logger.info(
        f"Backend registry initialized: {', '.join(registry.names())}",
        extra={'custom_dimensions': registry.describe()}
    )
    return registry


@lru_cache(maxsize=1)
def get_backend_registry() -> BackendRegistry:
    """Get singleton backend registry."""
    return build_backend_registry()
