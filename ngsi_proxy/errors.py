# ============================================================================
# CLAUDE CONTEXT - NGSI PROXY ERRORS
# ============================================================================
# STATUS: Standalone Module - Error kinds for the NGSI proxy
# PURPOSE: Exception hierarchy mapped onto NGSI status codes
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ProxyError, InvalidMapping, InvalidSelector, DuplicateAttribute,
#          UnsupportedShape, NotFoundError, FixtureNotFound, SourceFieldNotFound,
#          UpstreamError
# DEPENDENCIES: none
# ============================================================================

"""
NGSI Proxy Error Kinds

Every failure the proxy can report to a consumer is a ProxyError. Each kind
carries the NGSI status code and reason phrase the response assembler puts
into the error envelope.

    400 - client errors (mapping, selector, shape)
    404 - not-found class (fixtures, missing source fields)
    500 - upstream/transport class (timeouts, rate limits, bad payloads)
"""

from typing import Optional


class ProxyError(Exception):
    """Base class for all errors turned into NGSI error envelopes."""

    status_code: int = 500
    reason_phrase: str = "Internal Server Error"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def public_message(self) -> str:
        """Message safe to return to consumers."""
        return self.message


class InvalidMapping(ProxyError):
    """Malformed mapping or type string."""
    status_code = 400
    reason_phrase = "Bad Request"


class InvalidSelector(InvalidMapping):
    """Query selector the chosen backend cannot interpret."""


class DuplicateAttribute(ProxyError):
    """The same NGSI attribute name appears twice in one mapping."""
    status_code = 400
    reason_phrase = "Bad Request"


class UnsupportedShape(ProxyError):
    """Attribute shape the chosen backend cannot serve."""
    status_code = 400
    reason_phrase = "Bad Request"


class NotFoundError(ProxyError):
    status_code = 404
    reason_phrase = "No context element found"


class FixtureNotFound(NotFoundError):
    """No static fixture for (source_field, selector)."""


class SourceFieldNotFound(NotFoundError):
    """Upstream payload does not carry the requested source field."""


class UpstreamError(ProxyError):
    """
    Transport, timeout, rate-limit or malformed-payload failure of a live backend.

    The original cause is kept on `cause` for logging; consumers only see
    a generic message.
    """
    status_code = 500
    reason_phrase = "Internal Server Error"

    def __init__(self, message: str, cause: Optional[BaseException] = None, backend: Optional[str] = None):
        super().__init__(message, cause)
        self.backend = backend

    @property
    def public_message(self) -> str:
        if self.backend:
            return f"Upstream {self.backend} request failed"
        return "Upstream request failed"
