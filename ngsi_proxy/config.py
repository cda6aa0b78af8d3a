# ============================================================================
# CLAUDE CONTEXT - NGSI PROXY ROUTE CONFIGURATION
# ============================================================================
# STATUS: Configuration - Route records and convenience presets
# PURPOSE: Immutable RouteConfig records for parameterised and preset routes
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: RouteConfig, PRESETS, API_PREFIX, preset_route, context_urls
# DEPENDENCIES: none
# ============================================================================
"""
NGSI Proxy Route Configuration.

Each convenience route is an immutable RouteConfig built once at import
time. Parameterised routes build one RouteConfig per request from path
parameters. Nothing mutates request state.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

API_PREFIX = "proxy/v1"

BACKEND_RANDOM = "random"
BACKEND_STATIC = "static"
BACKEND_TWITTER = "twitter"
BACKEND_WEATHER = "weather"

BACKENDS = (BACKEND_RANDOM, BACKEND_STATIC, BACKEND_TWITTER, BACKEND_WEATHER)


@dataclass(frozen=True)
class RouteConfig:
    """Everything the service needs to answer one queryContext request."""
    backend: str
    type: str
    mapping: str
    query_string: Optional[str] = None
    entity_type: Optional[str] = None


# Location used by the weather convenience routes
DEFAULT_LOCATION = "Germany/Berlin"
# Search term used by the twitter convenience route
DEFAULT_SEARCH_TERM = "FIWARE"

# (backend, preset name) -> route record
PRESETS: Dict[Tuple[str, str], RouteConfig] = {
    # temperature
    (BACKEND_RANDOM, "temperature"): RouteConfig(BACKEND_RANDOM, "number", "temperature"),
    (BACKEND_STATIC, "temperature"): RouteConfig(BACKEND_STATIC, "number", "temperature"),
    (BACKEND_WEATHER, "temperature"): RouteConfig(
        BACKEND_WEATHER, "number", "temperature:temp_c", DEFAULT_LOCATION
    ),
    # relative humidity
    (BACKEND_RANDOM, "relativeHumidity"): RouteConfig(BACKEND_RANDOM, "number", "relativeHumidity"),
    (BACKEND_STATIC, "relativeHumidity"): RouteConfig(BACKEND_STATIC, "number", "relativeHumidity"),
    (BACKEND_WEATHER, "relativeHumidity"): RouteConfig(
        BACKEND_WEATHER, "number", "relativeHumidity:relative_humidity", DEFAULT_LOCATION
    ),
    # weather conditions
    (BACKEND_RANDOM, "weatherConditions"): RouteConfig(
        BACKEND_RANDOM, "number", "temperature,relativeHumidity"
    ),
    (BACKEND_STATIC, "weatherConditions"): RouteConfig(
        BACKEND_STATIC, "number", "temperature,relativeHumidity"
    ),
    (BACKEND_WEATHER, "weatherConditions"): RouteConfig(
        BACKEND_WEATHER, "number", "temperature:temp_c,relativeHumidity:relative_humidity", DEFAULT_LOCATION
    ),
    # tweets
    (BACKEND_RANDOM, "tweets"): RouteConfig(BACKEND_RANDOM, "list", "tweets:array"),
    (BACKEND_STATIC, "tweets"): RouteConfig(BACKEND_STATIC, "list", "tweets:array"),
    (BACKEND_TWITTER, "tweets"): RouteConfig(BACKEND_TWITTER, "list", "tweets:text", DEFAULT_SEARCH_TERM),
}


def preset_route(backend: str, preset: str) -> str:
    """Route pattern (without the `api/` prefix) of a convenience preset."""
    return f"{API_PREFIX}/{backend}/{preset}/queryContext"


def context_urls() -> List[str]:
    """Public URLs of every convenience preset, grouped by backend in route-table order."""
    return [
        f"/api/{preset_route(backend, preset)}"
        for backend, preset in sorted(PRESETS, key=lambda key: BACKENDS.index(key[0]))
    ]
