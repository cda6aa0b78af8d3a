# ============================================================================
# CLAUDE CONTEXT - NGSI PROXY SERVICE
# ============================================================================
# STATUS: Service Layer - queryContext orchestration
# PURPOSE: Parse mapping -> fetch from backend -> assemble NGSI response
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: NGSIProxyService
# DEPENDENCIES: .mapping, .assembler, backends.registry, util_logger
# ============================================================================
"""
NGSI Proxy Service Layer.

Single place where every error kind becomes data: parse errors short-circuit
before any backend call, backend errors are caught at the adapter boundary,
and both come back as error envelopes. Upstream causes are logged and never
returned to the consumer.

Usage:
    service = NGSIProxyService()
    response = service.query_context(PRESETS[("weather", "temperature")])
    body = response.to_dict()
"""

import time
import uuid
from typing import Optional

from .assembler import ResponseAssembler
from .config import RouteConfig
from .errors import ProxyError, UpstreamError
from .mapping import parse_mapping
from .models import EntityRef, QueryContextResponse
from backends.registry import BackendRegistry, get_backend_registry
from util_logger import LoggerFactory, ComponentType, LogContext

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "NGSIProxyService")


class NGSIProxyService:
    """
    queryContext business logic.

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(
        self,
        registry: Optional[BackendRegistry] = None,
        assembler: Optional[ResponseAssembler] = None,
        default_entity_type: Optional[str] = None
    ):
        self.registry = registry or get_backend_registry()
        self.assembler = assembler or ResponseAssembler()
        self.default_entity_type = default_entity_type or self.registry.default_entity_type

    def _resolve_entity(self, route: RouteConfig, entity: Optional[EntityRef]):
        entity_type = (entity.type if entity and entity.type else None) \
            or route.entity_type or self.default_entity_type
        entity_id = entity.id if entity and entity.id else None
        return entity_type, entity_id

    def query_context(
        self,
        route: RouteConfig,
        entity: Optional[EntityRef] = None,
        request_id: Optional[str] = None,
        correlation_id: Optional[str] = None
    ) -> QueryContextResponse:
        """
        Answer one queryContext request.

        Args:
            route: Backend, type, mapping and selector for this request
            entity: Entity named in the request body, if any
            request_id: Per-request id for logging
            correlation_id: Caller supplied correlation id (Fiware-Correlator)

        Returns:
            QueryContextResponse (success or error envelope, never raises ProxyError)
        """
        request_id = request_id or str(uuid.uuid4())[:8]
        entity_type, entity_id = self._resolve_entity(route, entity)
        context = LogContext(
            request_id=request_id,
            correlation_id=correlation_id,
            backend=route.backend,
            entity_type=entity_type,
            route=f"{route.type}/{route.mapping}"
        )
        dimensions = {**context.to_dict(), 'query_string': route.query_string}
        start_time = time.perf_counter()

        try:
            specs = parse_mapping(route.type, route.mapping)
        except ProxyError as e:
            logger.info(f"Rejected mapping: {e.message}", extra={'custom_dimensions': dimensions})
            return self.assembler.assemble_error(entity_type, e, entity_id)

        try:
            backend = self.registry.get(route.backend)
            values = backend.fetch_attributes(specs, route.query_string)
        except UpstreamError as e:
            logger.error(
                f"Upstream failure: {e.message}",
                exc_info=e.cause,
                extra={'custom_dimensions': {**dimensions, 'cause': repr(e.cause)}}
            )
            return self.assembler.assemble_error(entity_type, e, entity_id)
        except ProxyError as e:
            logger.info(
                f"{type(e).__name__}: {e.message}",
                extra={'custom_dimensions': dimensions}
            )
            return self.assembler.assemble_error(entity_type, e, entity_id)

        response = self.assembler.assemble(entity_type, specs, values, entity_id)

        logger.info(
            f"queryContext answered with status {response.status_code}",
            extra={'custom_dimensions': {
                **dimensions,
                'attributes': len(response.attributes),
                'duration_ms': round((time.perf_counter() - start_time) * 1000, 2)
            }}
        )
        return response
