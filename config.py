# ============================================================================
# CLAUDE CONTEXT - APPLICATION CONFIGURATION
# ============================================================================
# STATUS: Core Infrastructure - Configuration Management
# PURPOSE: Centralized configuration for backends and upstream API clients
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AppConfig, get_app_config, validate_configuration
# DEPENDENCIES: pydantic-settings
# SOURCE: Environment variables, .env file
# PATTERNS: Singleton pattern for config
# ============================================================================

"""
Application Configuration Module

Provides centralized configuration for the NGSI proxy:
- Live backend endpoints and credentials (Twitter, Weather)
- Upstream request timeout
- Static fixture file location
- Random backend list length and per-request fetch parallelism

Environment Variables:
    TWITTER_BASE_URL, TWITTER_BEARER_TOKEN, TWITTER_MAX_RESULTS
    WEATHER_BASE_URL, WEATHER_API_KEY
    UPSTREAM_TIMEOUT_SECONDS
    STATIC_FIXTURES_PATH
    RANDOM_LIST_LENGTH
    FETCH_MAX_WORKERS
    DEFAULT_ENTITY_TYPE

Usage:
    from config import get_app_config

    config = get_app_config()
    client = WeatherClient(config.weather_base_url, config.weather_api_key)
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# ============================================================================
# Application Configuration
# ============================================================================

class AppConfig(BaseSettings):
    """
    Application-wide configuration loaded from environment variables.

    Attributes:
        twitter_base_url: Twitter API v2 base URL
        twitter_bearer_token: App-only bearer token (Twitter backend disabled without it)
        twitter_max_results: Results per search (10-100)
        weather_base_url: Weather conditions API base URL
        weather_api_key: Weather API key (Weather backend disabled without it)
        upstream_timeout_seconds: Timeout for every live upstream call
        static_fixtures_path: Optional JSON file overlaying built-in fixtures
        random_list_length: Items per list attribute from the Random backend
        fetch_max_workers: Thread pool size for per-attribute extraction
        default_entity_type: Entity type used when a route names none
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Twitter
    twitter_base_url: str = Field(default="https://api.twitter.com/2", description="Twitter API base URL")
    twitter_bearer_token: Optional[str] = Field(default=None, description="Twitter bearer token")
    twitter_max_results: int = Field(default=10, ge=10, le=100, description="Search results per request")

    # Weather
    weather_base_url: str = Field(default="http://api.wunderground.com/api", description="Weather API base URL")
    weather_api_key: Optional[str] = Field(default=None, description="Weather API key")

    # Upstream
    upstream_timeout_seconds: float = Field(default=10.0, gt=0, description="Upstream request timeout")

    # Backends
    static_fixtures_path: Optional[Path] = Field(default=None, description="Static fixture JSON file")
    random_list_length: int = Field(default=3, ge=1, description="Random list attribute length")
    fetch_max_workers: int = Field(default=1, ge=1, le=32, description="Per-attribute fetch parallelism")

    default_entity_type: str = Field(default="Thing", description="Fallback NGSI entity type")

    @field_validator('static_fixtures_path')
    @classmethod
    def validate_fixtures_path(cls, v):
        """Ensure the fixture file exists when configured."""
        if v is not None and not Path(v).is_file():
            raise ValueError(f"STATIC_FIXTURES_PATH does not point to a file: {v}")
        return v


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """
    Get singleton application configuration instance.

    Returns:
        AppConfig: Validated configuration object

    Raises:
        ValidationError: If environment variables are invalid
    """
    return AppConfig()


# ============================================================================
# Configuration Validation
# ============================================================================

def _redact(secret: Optional[str]) -> str:
    if not secret:
        return "<not set>"
    return f"{secret[:4]}***"


def validate_configuration() -> bool:
    """
    Validate configuration on application startup.

    Returns:
        bool: True if configuration is valid

    Raises:
        Exception: If configuration validation fails
    """
    try:
        config = get_app_config()
        logger.info("Configuration validation:")
        logger.info(f"  Twitter API: {config.twitter_base_url} (token {_redact(config.twitter_bearer_token)})")
        logger.info(f"  Weather API: {config.weather_base_url} (key {_redact(config.weather_api_key)})")
        logger.info(f"  Upstream timeout: {config.upstream_timeout_seconds}s")
        logger.info(f"  Static fixtures: {config.static_fixtures_path or 'built-in'}")
        logger.info(f"  Random list length: {config.random_list_length}")
        logger.info(f"  Fetch workers: {config.fetch_max_workers}")

        if not config.twitter_bearer_token:
            logger.warning("⚠️ TWITTER_BEARER_TOKEN not set - Twitter backend will fail upstream calls")
        if not config.weather_api_key:
            logger.warning("⚠️ WEATHER_API_KEY not set - Weather backend will fail upstream calls")

        return True

    except Exception as e:
        logger.error(f"❌ Configuration validation failed: {e}")
        raise


# ============================================================================
# Module Initialization
# ============================================================================

if __name__ == "__main__":
    # For testing configuration
    logging.basicConfig(level=logging.INFO)
    validate_configuration()
