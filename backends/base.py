# ============================================================================
# CLAUDE CONTEXT - BACKEND ADAPTER CONTRACT
# ============================================================================
# STATUS: Adapter Layer - Uniform attribute-fetch contract
# PURPOSE: Base class every data source implements (random, static, twitter, weather)
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: BackendAdapter, RawAttributeValue
# DEPENDENCIES: ngsi_proxy.mapping, ngsi_proxy.errors, util_logger
# PATTERNS: Template method (validate -> prepare -> extract)
# ============================================================================

"""
Backend Adapter Contract.

`fetch_attributes(specs, selector)` returns one RawAttributeValue per spec,
in spec order. Subclasses plug into three steps:

    validate(specs, selector)   - shape/selector checks, no I/O
    prepare(selector)           - at most one shared upstream call per request
    extract_value(spec, payload, selector) - per attribute, no I/O expected

Per-attribute extraction runs on a bounded thread pool when `max_workers > 1`.
The pool is joined before returning and results keep spec order, so callers
never observe completion order.

Failure is atomic: the first ProxyError aborts the request. Any other
exception escaping a subclass is wrapped as UpstreamError with the cause kept.
"""

import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, List, Optional

from ngsi_proxy.errors import InvalidMapping, ProxyError, UpstreamError
from ngsi_proxy.mapping import MappingSpec, AttributeSpec
from util_logger import LoggerFactory, ComponentType, LogContext


@dataclass(frozen=True)
class RawAttributeValue:
    """Backend output for one attribute spec."""
    source_field: str
    value: Any


class BackendAdapter(ABC):
    """Base class for all attribute backends."""

    name: str = "backend"

    def __init__(self, max_workers: int = 1):
        self.max_workers = max(1, int(max_workers))
        self.logger = LoggerFactory.create_logger(
            ComponentType.ADAPTER,
            f"{self.name}Backend",
            context=LogContext(backend=self.name)
        )

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def fetch_attributes(self, specs: MappingSpec, selector: Optional[str] = None) -> List[RawAttributeValue]:
        """
        Fetch raw values for every spec.

        Args:
            specs: Parsed mapping (order is preserved in the result)
            selector: Backend-specific query selector

        Returns:
            List of RawAttributeValue, same length and order as specs

        Raises:
            ProxyError: First failure encountered (no partial results)
        """
        if not specs:
            raise InvalidMapping("No attributes requested")

        start_time = time.perf_counter()
        self.validate(specs, selector)

        try:
            payload = self.prepare(selector)
            values = self._extract_all(specs, payload, selector)
        except ProxyError:
            raise
        except Exception as e:
            self.logger.exception(f"Unexpected error in {self.name} backend: {e}")
            raise UpstreamError(f"{self.name} backend failed: {e}", cause=e, backend=self.name) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.debug(
            f"Fetched {len(values)} attributes from {self.name}",
            extra={'custom_dimensions': {
                'backend': self.name,
                'attributes': [spec.ngsi_name for spec in specs],
                'duration_ms': round(duration_ms, 2)
            }}
        )
        return values

    def _extract_all(self, specs: MappingSpec, payload: Any, selector: Optional[str]) -> List[RawAttributeValue]:
        def extract(spec: AttributeSpec) -> RawAttributeValue:
            return RawAttributeValue(
                source_field=spec.source_field,
                value=self.extract_value(spec, payload, selector)
            )

        if self.max_workers == 1 or len(specs) == 1:
            return [extract(spec) for spec in specs]

        # executor.map yields in submission order and re-raises the first failure
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(specs))) as executor:
            return list(executor.map(extract, specs))

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def validate(self, specs: MappingSpec, selector: Optional[str]) -> None:
        """Reject specs or selectors this backend cannot serve. No I/O."""

    def prepare(self, selector: Optional[str]) -> Any:
        """Load the shared payload for this request (default: nothing)."""
        return None

    @abstractmethod
    def extract_value(self, spec: AttributeSpec, payload: Any, selector: Optional[str]) -> Any:
        """Return the raw value for one spec."""

    def close(self) -> None:
        """Release client resources."""

    def describe(self) -> dict:
        """Static description used by health checks."""
        return {"backend": self.name, "max_workers": self.max_workers}
