# ============================================================================
# CLAUDE CONTEXT - NGSI PROXY MODULE
# ============================================================================
# STATUS: Core Module - NGSI queryContext proxy
# PURPOSE: Mapping grammar, NGSI models, response assembly and HTTP triggers
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: parse_mapping, format_mapping, AttributeSpec, AttributeShape,
#          ResponseAssembler, QueryContextResponse, ProxyError
# PYDANTIC_MODELS: QueryContextResponse, ContextElement, ContextAttribute, StatusCode
# DEPENDENCIES: pydantic, azure-functions (triggers only)
# ENTRY_POINTS: from ngsi_proxy.triggers import get_proxy_triggers
# ============================================================================

"""
NGSI Proxy Module

Answers NGSI v1 queryContext requests with attribute values sourced from
interchangeable backends (see the `backends` package).

Architecture:
    ngsi_proxy/
    ├── config.py      # Route records and convenience presets
    ├── errors.py      # Error kinds -> NGSI status codes
    ├── mapping.py     # Mapping grammar (type + mapping -> attribute specs)
    ├── models.py      # Pydantic models (NGSI envelope)
    ├── assembler.py   # Specs + values -> NGSI response
    ├── service.py     # parse -> fetch -> assemble
    └── triggers.py    # Azure Functions HTTP handlers

The trigger and service modules are imported explicitly by function_app.py;
they depend on `backends`, which in turn depends on this package's errors
and mapping modules.
"""

from .errors import (
    ProxyError,
    InvalidMapping,
    InvalidSelector,
    DuplicateAttribute,
    UnsupportedShape,
    NotFoundError,
    FixtureNotFound,
    SourceFieldNotFound,
    UpstreamError,
)
from .mapping import AttributeShape, AttributeSpec, parse_mapping, format_mapping
from .models import QueryContextResponse
from .assembler import ResponseAssembler

__version__ = "1.0.0"
__all__ = [
    "ProxyError",
    "InvalidMapping",
    "InvalidSelector",
    "DuplicateAttribute",
    "UnsupportedShape",
    "NotFoundError",
    "FixtureNotFound",
    "SourceFieldNotFound",
    "UpstreamError",
    "AttributeShape",
    "AttributeSpec",
    "parse_mapping",
    "format_mapping",
    "QueryContextResponse",
    "ResponseAssembler",
]
