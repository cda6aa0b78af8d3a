# ============================================================================
# CLAUDE CONTEXT - HEALTH CHECK MODULE
# ============================================================================
# STATUS: Core Infrastructure - Health Monitoring
# PURPOSE: Health checks for the proxy backends (fixtures, upstream credentials)
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: get_public_health, get_detailed_health, get_app_identity, HealthStatus
# DEPENDENCIES: backends.registry, config, util_logger
# PATTERNS: Two-tier health checks (public/detailed)
# ============================================================================

"""
Health Check Module for the NGSI context proxy.

1. Public Health (/api/health):
   - Status and timestamp only
   - Always returns 200 (status in body indicates health)

2. Detailed Health (/api/health/detailed):
   - Static fixture table loaded (critical)
   - Twitter / Weather credentials configured (non-critical -> degraded)
   - Backend descriptions
   - Returns 503 if unhealthy

No upstream calls are made; a health probe must not spend the
upstream rate limit.

Usage:
    from health import get_public_health, get_detailed_health

    result = get_detailed_health()
    # {"status": "degraded", "checks": {...}, ...}
"""

import time
import uuid
from enum import Enum
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional, Dict, Any

from backends.registry import BackendRegistry, get_backend_registry
from config import get_app_config
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "HealthService")

APP_NAME = "ngsi-context-proxy"
APP_DESCRIPTION = "NGSI queryContext Proxy (random, static, twitter, weather)"


class HealthStatus(str, Enum):
    """Health status values."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"      # Non-critical components failing
    UNHEALTHY = "unhealthy"    # Critical components failing


@dataclass
class CheckResult:
    """Result of a single health check."""
    status: str              # "pass" or "fail"
    latency_ms: float
    message: str
    details: Optional[Dict[str, Any]] = None

    @property
    def passed(self) -> bool:
        return self.status == "pass"

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "status": self.status,
            "latency_ms": round(self.latency_ms, 2),
            "message": self.message
        }
        if self.details:
            result["details"] = self.details
        return result


def get_app_identity() -> Dict[str, str]:
    """Name and description used in startup logs and detailed health."""
    return {"name": APP_NAME, "description": APP_DESCRIPTION}


# ============================================================================
# Health Check Functions
# ============================================================================

def check_static_fixtures(registry: BackendRegistry) -> CheckResult:
    """
    Check the static backend has a non-empty fixture table.

    Critical check - failure means UNHEALTHY status.
    """
    start_time = time.perf_counter()

    try:
        description = registry.get("static").describe()
    except Exception as e:
        logger.error(f"Static fixture check failed: {e}")
        return CheckResult(
            status="fail",
            latency_ms=(time.perf_counter() - start_time) * 1000,
            message=f"Static backend unavailable: {type(e).__name__}",
            details={"error": str(e)}
        )

    count = description.get("fixtures", 0)
    return CheckResult(
        status="pass" if count else "fail",
        latency_ms=(time.perf_counter() - start_time) * 1000,
        message=f"{count} fixtures loaded" if count else "Fixture table is empty",
        details={"fixtures": count}
    )


def check_upstream_configured(registry: BackendRegistry, backend_name: str) -> CheckResult:
    """
    Check a live backend has upstream credentials.

    Non-critical check - failure means DEGRADED status.
    """
    start_time = time.perf_counter()

    try:
        description = registry.get(backend_name).describe()
    except Exception as e:
        logger.error(f"{backend_name} configuration check failed: {e}")
        return CheckResult(
            status="fail",
            latency_ms=(time.perf_counter() - start_time) * 1000,
            message=f"{backend_name} backend unavailable: {type(e).__name__}",
            details={"error": str(e)}
        )

    configured = bool(description.get("configured"))
    return CheckResult(
        status="pass" if configured else "fail",
        latency_ms=(time.perf_counter() - start_time) * 1000,
        message="Credentials configured" if configured else "Credentials missing",
        details=description
    )


# ============================================================================
# Main Entry Points
# ============================================================================

def get_public_health(registry: Optional[BackendRegistry] = None) -> Dict[str, Any]:
    """
    Get minimal health status for public endpoint.

    Returns:
        Dict with status and timestamp only
    """
    start_time = time.perf_counter()
    registry = registry or get_backend_registry()

    fixtures_result = check_static_fixtures(registry)
    status = HealthStatus.HEALTHY if fixtures_result.passed else HealthStatus.UNHEALTHY

    logger.info("Public health check completed", extra={
        'custom_dimensions': {
            'status': status.value,
            'duration_ms': round((time.perf_counter() - start_time) * 1000, 2),
            'check_type': 'public'
        }
    })

    return {
        "status": status.value,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def get_detailed_health(registry: Optional[BackendRegistry] = None) -> Dict[str, Any]:
    """
    Get detailed health status for operations.

    Returns:
        Dict with per-check results, backend descriptions and overall status
    """
    start_time = time.perf_counter()
    request_id = str(uuid.uuid4())[:8]
    registry = registry or get_backend_registry()

    checks = {}
    critical_failures = []
    non_critical_failures = []

    fixtures_result = check_static_fixtures(registry)
    checks["static_fixtures"] = fixtures_result.to_dict()
    if not fixtures_result.passed:
        critical_failures.append("static_fixtures")

    for backend_name in ("twitter", "weather"):
        check_name = f"{backend_name}_configured"
        result = check_upstream_configured(registry, backend_name)
        checks[check_name] = result.to_dict()
        if not result.passed:
            non_critical_failures.append(check_name)

    if critical_failures:
        status = HealthStatus.UNHEALTHY
    elif non_critical_failures:
        status = HealthStatus.DEGRADED
    else:
        status = HealthStatus.HEALTHY

    total_duration = (time.perf_counter() - start_time) * 1000

    logger.info("Detailed health check completed", extra={
        'custom_dimensions': {
            'status': status.value,
            'duration_ms': round(total_duration, 2),
            'check_type': 'detailed',
            'request_id': request_id,
            'critical_failures': critical_failures,
            'non_critical_failures': non_critical_failures
        }
    })

    identity = get_app_identity()
    return {
        "status": status.value,
        "app": identity["name"],
        "description": identity["description"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "checks": checks,
        "backends": registry.describe(),
        "upstream_timeout_seconds": get_app_config().upstream_timeout_seconds,
        "total_duration_ms": round(total_duration, 2)
    }
