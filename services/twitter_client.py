# ============================================================================
# CLAUDE CONTEXT - TWITTER SEARCH CLIENT
# ============================================================================
# STATUS: Service Layer - Social search API client
# PURPOSE: Recent-search calls against the Twitter v2 API
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: TwitterClient
# DEPENDENCIES: httpx (sync), services.http_client
# PORTABLE: Yes - no config imports
# ============================================================================
"""
Twitter Search Client (SYNC VERSION).

    GET {base_url}/tweets/search/recent?query=<term>&max_results=<n>
    Authorization: Bearer <token>

Results are returned in `data` (list of {"id", "text", ...}). The API
omits `data` entirely when nothing matched.
"""

from typing import Optional

import httpx

from services.http_client import JSONHTTPClient, UpstreamResponse

# Limits imposed by the recent-search endpoint
MIN_RESULTS = 10
MAX_RESULTS = 100


class TwitterClient(JSONHTTPClient):
    """Sync client for Twitter recent search."""

    service_name = "Twitter"

    def __init__(
        self,
        base_url: str = "https://api.twitter.com/2",
        bearer_token: Optional[str] = None,
        max_results: int = MIN_RESULTS,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        headers = {"Authorization": f"Bearer {bearer_token}"} if bearer_token else {}
        super().__init__(base_url, timeout=timeout, headers=headers, transport=transport)
        self.bearer_token = bearer_token
        self.max_results = min(max(max_results, MIN_RESULTS), MAX_RESULTS)

    @property
    def is_configured(self) -> bool:
        return bool(self.bearer_token)

    def search_recent(self, query: str) -> UpstreamResponse:
        """Search recent tweets matching `query`."""
        if not self.is_configured:
            return UpstreamResponse(
                success=False,
                status_code=500,
                error="Twitter bearer token not configured"
            )

        params = {
            "query": query,
            "max_results": self.max_results,
        }
        return self._request("/tweets/search/recent", params=params)
