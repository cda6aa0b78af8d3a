# ============================================================================
# CLAUDE CONTEXT - AZURE FUNCTIONS ENTRY POINT
# ============================================================================
# STATUS: Core Infrastructure - Function App Entry Point
# PURPOSE: Main entry point for Azure Functions runtime with the NGSI proxy API
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: app (FunctionApp instance)
# DEPENDENCIES: azure-functions, ngsi_proxy, health
# ============================================================================

"""
Azure Functions Entry Point for the NGSI context proxy.

Registers:
    - NGSI proxy API: parameterised queryContext routes per backend,
      convenience preset routes and the GET proxy/v1 discovery document
    - Health checks: 2 endpoints
        - /api/health - Public (minimal response for external callers)
        - /api/health/detailed - Internal (full check results)

Deployment:
    - Local: func start
    - Azure: func azure functionapp publish <app-name> --python --build remote
"""

import json
import logging

import azure.functions as func

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize Azure Function App
app = func.FunctionApp()


def _register(name: str, route: str, methods, handler) -> None:
    """Register a trigger handler under a unique function name."""
    def endpoint(req: func.HttpRequest) -> func.HttpResponse:
        return handler(req)

    endpoint.__name__ = name
    app.function_name(name=name)(
        app.route(route=route, methods=methods, auth_level=func.AuthLevel.ANONYMOUS)(endpoint)
    )


# ============================================================================
# NGSI Proxy API
# ============================================================================

from ngsi_proxy.triggers import get_proxy_triggers

logger.info("Registering NGSI proxy endpoints...")

proxy_triggers = get_proxy_triggers()
for trigger in proxy_triggers:
    _register(trigger['name'], trigger['route'], trigger['methods'], trigger['handler'])

logger.info(f"✅ NGSI proxy registered successfully ({len(proxy_triggers)} endpoints)")

# ============================================================================
# Health Check Endpoints - 2 Endpoints (Public + Detailed)
# ============================================================================

@app.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """
    Public health check endpoint - minimal response for external callers.

    Always returns 200 - status in body indicates health.
    """
    from health import get_public_health

    result = get_public_health()

    return func.HttpResponse(
        json.dumps(result, default=str),
        mimetype="application/json",
        status_code=200,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"}
    )


@app.route(route="health/detailed", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_detailed(req: func.HttpRequest) -> func.HttpResponse:
    """
    Detailed health check endpoint.

    Returns 503 if unhealthy, 200 otherwise (healthy or degraded).
    """
    from health import get_detailed_health, HealthStatus

    result = get_detailed_health()
    status_code = 503 if result["status"] == HealthStatus.UNHEALTHY.value else 200

    return func.HttpResponse(
        json.dumps(result, default=str, indent=2),
        mimetype="application/json",
        status_code=status_code,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"}
    )

# ============================================================================
# Application Startup
# ============================================================================

from config import validate_configuration
from health import get_app_identity

_app_identity = get_app_identity()
validate_configuration()

logger.info("="*60)
logger.info(f"{_app_identity['name']} - {_app_identity['description']}")
logger.info("="*60)
logger.info("Function App initialized successfully")
logger.info("Available endpoints:")
logger.info("  - GET /api/health - Public health check (minimal)")
logger.info("  - GET /api/health/detailed - Detailed health")
logger.info("")
logger.info(f"NGSI proxy ({len(proxy_triggers)} endpoints):")
for trigger in proxy_triggers:
    logger.info(f"  - {'/'.join(trigger['methods'])} /api/{trigger['route']}")
logger.info("="*60)
