# ============================================================================
# CLAUDE CONTEXT - NGSI RESPONSE ASSEMBLER
# ============================================================================
# STATUS: Standalone Module - queryContext envelope construction
# PURPOSE: Turn attribute specs + raw backend values (or an error) into NGSI responses
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ResponseAssembler, attribute_type
# DEPENDENCIES: .models, .mapping, .errors, util_logger
# ============================================================================

"""
NGSI Response Assembler.

`assemble` zips specs with backend values by position, so attribute order
is always the mapping order. `assemble_error` builds the error envelope
(empty attribute list, status taken from the ProxyError kind).

The assembler never raises: inconsistent input (length or field mismatch,
wrong value shape) is logged and reported as a 500 envelope.
"""

import math
from numbers import Number
from typing import Any, Optional, Sequence

from .errors import ProxyError
from .mapping import AttributeSpec, MappingSpec
from .models import (
    ContextAttribute,
    ContextElement,
    ContextElementResponse,
    QueryContextResponse,
    StatusCode,
)
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.ASSEMBLER, "ResponseAssembler")

ATTRIBUTE_TYPE_NUMBER = "number"
ATTRIBUTE_TYPE_STRING = "string"
ATTRIBUTE_TYPE_BOOLEAN = "boolean"
ATTRIBUTE_TYPE_ARRAY = "array"

STATUS_OK = StatusCode(code="200", reasonPhrase="OK")


def attribute_type(spec: AttributeSpec, value: Any) -> str:
    """NGSI attribute type for a spec/value pair."""
    if spec.is_list:
        return ATTRIBUTE_TYPE_ARRAY
    if isinstance(value, bool):
        return ATTRIBUTE_TYPE_BOOLEAN
    if isinstance(value, Number):
        return ATTRIBUTE_TYPE_NUMBER
    return ATTRIBUTE_TYPE_STRING


def is_finite(value: Any) -> bool:
    """False for NaN and infinite floats, which have no JSON encoding."""
    items = value if isinstance(value, list) else [value]
    return all(not isinstance(item, float) or math.isfinite(item) for item in items)


class ResponseAssembler:
    """Builds queryContext response envelopes."""

    def _envelope(
        self,
        entity_type: str,
        entity_id: Optional[str],
        status: StatusCode,
        attributes: Sequence[ContextAttribute] = ()
    ) -> QueryContextResponse:
        element = ContextElement(
            type=entity_type,
            id=entity_id or entity_type,
            attributes=list(attributes)
        )
        return QueryContextResponse(
            contextResponses=[ContextElementResponse(contextElement=element, statusCode=status)]
        )

    def _check(self, specs: MappingSpec, values: Sequence[Any]) -> Optional[str]:
        """Return a description of the first inconsistency, if any."""
        if len(specs) != len(values):
            return f"expected {len(specs)} values, got {len(values)}"

        for spec, raw in zip(specs, values):
            if raw.source_field != spec.source_field:
                return f"value for '{raw.source_field}' where '{spec.source_field}' was expected"
            if spec.is_list != isinstance(raw.value, list):
                return f"value shape of '{spec.ngsi_name}' does not match its mapping"
            if not is_finite(raw.value):
                return f"value of '{spec.ngsi_name}' is not a finite number"
        return None

    def assemble(
        self,
        entity_type: str,
        specs: MappingSpec,
        values: Sequence[Any],
        entity_id: Optional[str] = None
    ) -> QueryContextResponse:
        """
        Build a success envelope.

        Args:
            entity_type: NGSI entity type of the context element
            specs: Parsed mapping, defines attribute order
            values: RawAttributeValue per spec, same order
            entity_id: Entity id (defaults to the entity type)

        Returns:
            QueryContextResponse with status 200, or a 500 envelope on inconsistent input
        """
        problem = self._check(specs, values)
        if problem:
            logger.error(f"Backend output does not match mapping: {problem}")
            return self._envelope(
                entity_type,
                entity_id,
                StatusCode(
                    code="500",
                    reasonPhrase="Internal Server Error",
                    details="Backend output does not match mapping"
                )
            )

        try:
            attributes = [
                ContextAttribute(
                    name=spec.ngsi_name,
                    type=attribute_type(spec, raw.value),
                    value=raw.value
                )
                for spec, raw in zip(specs, values)
            ]
        except ValueError as e:
            # pydantic.ValidationError: value is neither a scalar nor a list of scalars
            logger.error(f"Backend value cannot be encoded as an NGSI attribute: {e}")
            return self._envelope(
                entity_type,
                entity_id,
                StatusCode(
                    code="500",
                    reasonPhrase="Internal Server Error",
                    details="Backend value cannot be encoded as an NGSI attribute"
                )
            )

        return self._envelope(entity_type, entity_id, STATUS_OK, attributes)

    def assemble_error(
        self,
        entity_type: str,
        error: ProxyError,
        entity_id: Optional[str] = None
    ) -> QueryContextResponse:
        """Build an error envelope with an empty attribute list."""
        status = StatusCode(
            code=str(error.status_code),
            reasonPhrase=error.reason_phrase,
            details=error.public_message
        )
        return self._envelope(entity_type, entity_id, status)
