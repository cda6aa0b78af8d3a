# ============================================================================
# CLAUDE CONTEXT - NGSI PROXY HTTP TRIGGERS
# ============================================================================
# STATUS: Trigger Layer - HTTP handlers for queryContext endpoints
# PURPOSE: Azure Functions HTTP handlers for the proxy API
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: get_proxy_triggers
# DEPENDENCIES: azure-functions, .service, .config
# ============================================================================
"""
NGSI Proxy HTTP Triggers.

Endpoints (all POST unless noted):
- /api/proxy/v1/random/{type}/{mapping}/queryContext
- /api/proxy/v1/static/{type}/{mapping}/queryContext
- /api/proxy/v1/static/{type}/{mapping}/{queryString}/queryContext
- /api/proxy/v1/twitter/{type}/{mapping}/{queryString}/queryContext
- /api/proxy/v1/weather/{type}/{mapping}/{queryString}/queryContext
- /api/proxy/v1/{backend}/{preset}/queryContext - convenience presets
- GET /api/proxy/v1 - discovery document

`queryString` is URL-decoded, so "Germany%2FBerlin" selects Germany/Berlin.

NGSI envelopes are always returned with HTTP 200; the outcome is carried
in the envelope's statusCode.

Integration (in function_app.py):
    from ngsi_proxy.triggers import get_proxy_triggers

    for trigger in get_proxy_triggers():
        ...register trigger['handler'] under trigger['name'] and trigger['route']
"""

import json
import uuid
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import unquote

import azure.functions as func
from pydantic import ValidationError

from .assembler import ResponseAssembler
from .config import (
    API_PREFIX,
    BACKEND_RANDOM,
    BACKEND_STATIC,
    BACKEND_TWITTER,
    BACKEND_WEATHER,
    PRESETS,
    RouteConfig,
    context_urls,
    preset_route,
)
from .errors import UpstreamError
from .models import EntityRef, QueryContextRequest
from .service import NGSIProxyService
from config import get_app_config
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "ProxyTriggers")

CORRELATOR_HEADER = "Fiware-Correlator"


# ============================================================================
# TRIGGER REGISTRY FUNCTION
# ============================================================================

def get_proxy_triggers(service_factory: Optional[Callable[[], NGSIProxyService]] = None) -> List[Dict[str, Any]]:
    """
    Get list of proxy trigger configurations for function_app.py.

    Args:
        service_factory: Builds the NGSIProxyService on first request
            (default: service over the process-wide backend registry)

    Returns:
        List of dicts with keys:
        - name: Unique Azure function name
        - route: URL route pattern
        - methods: List of HTTP methods
        - handler: Callable trigger handler
    """
    factory = service_factory or NGSIProxyService
    triggers = [
        {
            'name': 'proxy_discovery',
            'route': API_PREFIX,
            'methods': ['GET'],
            'handler': DiscoveryTrigger().handle
        },
        {
            'name': 'proxy_random_query_context',
            'route': f'{API_PREFIX}/random/{{type}}/{{mapping}}/queryContext',
            'methods': ['POST'],
            'handler': QueryContextTrigger(BACKEND_RANDOM, factory).handle
        },
        {
            'name': 'proxy_static_query_context',
            'route': f'{API_PREFIX}/static/{{type}}/{{mapping}}/queryContext',
            'methods': ['POST'],
            'handler': QueryContextTrigger(BACKEND_STATIC, factory).handle
        },
        {
            'name': 'proxy_static_selector_query_context',
            'route': f'{API_PREFIX}/static/{{type}}/{{mapping}}/{{queryString}}/queryContext',
            'methods': ['POST'],
            'handler': QueryContextTrigger(BACKEND_STATIC, factory).handle
        },
        {
            'name': 'proxy_twitter_query_context',
            'route': f'{API_PREFIX}/twitter/{{type}}/{{mapping}}/{{queryString}}/queryContext',
            'methods': ['POST'],
            'handler': QueryContextTrigger(BACKEND_TWITTER, factory).handle
        },
        {
            'name': 'proxy_weather_query_context',
            'route': f'{API_PREFIX}/weather/{{type}}/{{mapping}}/{{queryString}}/queryContext',
            'methods': ['POST'],
            'handler': QueryContextTrigger(BACKEND_WEATHER, factory).handle
        },
    ]

    for (backend, preset), route_config in PRESETS.items():
        triggers.append({
            'name': f'proxy_{backend}_{preset}',
            'route': preset_route(backend, preset),
            'methods': ['POST'],
            'handler': PresetQueryContextTrigger(route_config, factory).handle
        })

    return triggers


# ============================================================================
# BASE TRIGGER CLASS
# ============================================================================

class BaseProxyTrigger:
    """
    Base class for proxy triggers.

    Provides common functionality:
    - JSON response formatting
    - queryContext body parsing
    - Lazy, shared service creation
    """

    def __init__(self, service_factory: Optional[Callable[[], NGSIProxyService]] = None):
        self._service_factory = service_factory or NGSIProxyService
        self._service: Optional[NGSIProxyService] = None

    @property
    def service(self) -> NGSIProxyService:
        if self._service is None:
            self._service = self._service_factory()
        return self._service

    def _json_response(self, data: Dict, status_code: int = 200) -> func.HttpResponse:
        """Create JSON response."""
        return func.HttpResponse(
            json.dumps(data),
            status_code=status_code,
            mimetype="application/json"
        )

    def _entity_from_body(self, req: func.HttpRequest) -> Optional[EntityRef]:
        """First entity of the queryContext body; None for empty or malformed bodies."""
        if not req.get_body():
            return None
        try:
            body = req.get_json()
            return QueryContextRequest.model_validate(body).first_entity()
        except (ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable queryContext body: {e}")
            return None

    def _default_entity_type(self) -> str:
        """Entity type of the service in use, or the configured default."""
        return getattr(self._service, 'default_entity_type', None) or get_app_config().default_entity_type

    def _answer(self, req: func.HttpRequest, route: RouteConfig) -> func.HttpResponse:
        request_id = str(uuid.uuid4())[:8]
        correlation_id = req.headers.get(CORRELATOR_HEADER)
        entity = self._entity_from_body(req)

        try:
            response = self.service.query_context(
                route, entity=entity, request_id=request_id, correlation_id=correlation_id
            )
        except Exception as e:
            logger.exception(
                f"Error answering queryContext: {e}",
                extra={'custom_dimensions': {'request_id': request_id, 'correlation_id': correlation_id}}
            )
            entity_type = (entity.type if entity and entity.type else None) \
                or route.entity_type or self._default_entity_type()
            response = ResponseAssembler().assemble_error(
                entity_type,
                UpstreamError(f"Internal error: {e}", cause=e),
                entity.id if entity else None
            )

        return self._json_response(response.to_dict())


# ============================================================================
# QUERY CONTEXT TRIGGERS
# ============================================================================

class QueryContextTrigger(BaseProxyTrigger):
    """
    Parameterised queryContext endpoint bound to one backend.

    POST /api/proxy/v1/{backend}/{type}/{mapping}[/{queryString}]/queryContext
    """

    def __init__(self, backend: str, service_factory: Optional[Callable[[], NGSIProxyService]] = None):
        super().__init__(service_factory)
        self.backend = backend

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        """Handle queryContext request."""
        query_string = req.route_params.get('queryString')
        route = RouteConfig(
            backend=self.backend,
            type=unquote(req.route_params.get('type') or ''),
            mapping=unquote(req.route_params.get('mapping') or ''),
            query_string=unquote(query_string) if query_string else None
        )
        return self._answer(req, route)


class PresetQueryContextTrigger(BaseProxyTrigger):
    """
    Convenience queryContext endpoint with a fixed route record.

    POST /api/proxy/v1/{backend}/{preset}/queryContext
    """

    def __init__(self, route: RouteConfig, service_factory: Optional[Callable[[], NGSIProxyService]] = None):
        super().__init__(service_factory)
        self.route = route

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        """Handle convenience queryContext request."""
        return self._answer(req, self.route)


# ============================================================================
# DISCOVERY TRIGGER
# ============================================================================

class DiscoveryTrigger(BaseProxyTrigger):
    """
    List the convenience endpoints.

    GET /api/proxy/v1
    """

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        """Handle discovery request."""
        return self._json_response({"context_urls": context_urls()})
