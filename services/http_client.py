# ============================================================================
# CLAUDE CONTEXT - UPSTREAM JSON HTTP CLIENT
# ============================================================================
# STATUS: Service Layer - Shared sync HTTP client for live backends
# PURPOSE: httpx wrapper returning UpstreamResponse instead of raising
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: JSONHTTPClient, UpstreamResponse
# DEPENDENCIES: httpx (sync), util_logger
# PORTABLE: Yes - no config imports, base_url/timeout passed by caller
# ============================================================================
"""
Upstream JSON HTTP Client (SYNC VERSION).

Base class for the social-search and weather API clients. Every call
returns an UpstreamResponse; transport errors, timeouts, HTTP error
statuses and non-JSON bodies are reported as `success=False` with the
original exception kept on `exception`.

Usage:
    client = TwitterClient(base_url="https://api.twitter.com/2", bearer_token="...")
    response = client.search_recent("FIWARE")
    if not response.success:
        ...
    client.close()
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.CLIENT, "JSONHTTPClient")


@dataclass
class UpstreamResponse:
    """Response wrapper for upstream API calls."""
    success: bool
    status_code: int
    data: Optional[Any] = None
    error: Optional[str] = None
    exception: Optional[BaseException] = None


class JSONHTTPClient:
    """
    Sync JSON client over httpx.Client.

    The httpx client is created lazily and reused across requests.
    Pass `transport` to route calls through a custom httpx transport.
    """

    service_name = "upstream"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.base_url = (base_url or "").rstrip('/')
        if not self.base_url:
            raise ValueError(f"{type(self).__name__} requires a base_url")
        self.timeout = timeout
        self.headers = headers or {}
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        """Get or create sync HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers=self.headers,
                transport=self._transport
            )
        return self._client

    def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()

    def _request(self, endpoint: str, params: Optional[Dict] = None) -> UpstreamResponse:
        """
        GET a JSON document from the upstream API.

        Args:
            endpoint: Path appended to base_url
            params: Query parameters

        Returns:
            UpstreamResponse with parsed JSON or error
        """
        url = f"{self.base_url}{endpoint}"
        client = self._get_client()

        try:
            response = client.get(url, params=params)
            logger.debug(
                f"{self.service_name} responded {response.status_code}",
                extra={'custom_dimensions': {
                    'service': self.service_name,
                    'endpoint': endpoint.split('/')[-1],
                    'status_code': response.status_code
                }}
            )

            if response.status_code == 429:
                return UpstreamResponse(
                    success=False,
                    status_code=429,
                    error=f"{self.service_name} rate limit exceeded"
                )

            if response.status_code >= 400:
                error_text = response.text[:500] if response.text else "Unknown error"
                return UpstreamResponse(
                    success=False,
                    status_code=response.status_code,
                    error=f"{self.service_name} error {response.status_code}: {error_text}"
                )

            try:
                data = response.json()
            except ValueError as e:
                return UpstreamResponse(
                    success=False,
                    status_code=502,
                    error=f"{self.service_name} returned a non-JSON body",
                    exception=e
                )

            return UpstreamResponse(success=True, status_code=response.status_code, data=data)

        except httpx.TimeoutException as e:
            logger.warning(f"{self.service_name} request timed out after {self.timeout}s")
            return UpstreamResponse(
                success=False,
                status_code=504,
                error=f"{self.service_name} request timeout after {self.timeout}s",
                exception=e
            )
        except httpx.RequestError as e:
            logger.warning(f"{self.service_name} request error: {type(e).__name__}")
            return UpstreamResponse(
                success=False,
                status_code=502,
                error=f"{self.service_name} request error: {str(e)}",
                exception=e
            )
