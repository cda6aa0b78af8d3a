# ============================================================================
# CLAUDE CONTEXT - BACKENDS MODULE
# ============================================================================
# STATUS: Adapter Layer - Attribute data sources
# PURPOSE: Random, static, twitter and weather backends behind one contract
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: BackendAdapter, RandomBackend, StaticBackend, TwitterBackend,
#          WeatherBackend, BackendRegistry, get_backend_registry
# DEPENDENCIES: httpx (via services), ngsi_proxy.errors, ngsi_proxy.mapping
# ============================================================================
"""
Attribute Backends.

Interchangeable data sources behind one fetch contract:

    backends/
    ├── base.py             # BackendAdapter contract, RawAttributeValue
    ├── random_backend.py   # Synthetic values
    ├── static_backend.py   # Fixed fixtures keyed by (source_field, selector)
    ├── twitter_backend.py  # Tweet search results (list attributes)
    ├── weather_backend.py  # Current weather conditions (scalar attributes)
    └── registry.py         # Process-wide name -> backend lookup
"""

from .base import BackendAdapter, RawAttributeValue
from .random_backend import RandomBackend
from .static_backend import StaticBackend
from .twitter_backend import TwitterBackend
from .weather_backend import WeatherBackend
from .registry import BackendRegistry, build_backend_registry, get_backend_registry

__all__ = [
    "BackendAdapter",
    "RawAttributeValue",
    "RandomBackend",
    "StaticBackend",
    "TwitterBackend",
    "WeatherBackend",
    "BackendRegistry",
    "build_backend_registry",
    "get_backend_registry",
]
