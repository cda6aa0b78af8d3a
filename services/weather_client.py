# ============================================================================
# CLAUDE CONTEXT - WEATHER CONDITIONS CLIENT
# ============================================================================
# STATUS: Service Layer - Weather API client
# PURPOSE: Current-conditions lookup by "Country/City" location path
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: WeatherClient
# DEPENDENCIES: httpx (sync), services.http_client
# PORTABLE: Yes - no config imports
# ============================================================================
"""
Weather Conditions Client (SYNC VERSION).

Wunderground-style conditions endpoint:

    GET {base_url}/{api_key}/conditions/q/{Country}/{City}.json

A single response carries every observation field, e.g.

    {"current_observation": {"temp_c": 12.4, "relative_humidity": "71%", ...}}

API-level failures come back with HTTP 200 and a `response.error` object.
"""

from typing import Optional
from urllib.parse import quote

import httpx

from services.http_client import JSONHTTPClient, UpstreamResponse


class WeatherClient(JSONHTTPClient):
    """Sync client for the weather conditions API."""

    service_name = "Weather"

    def __init__(
        self,
        base_url: str = "http://api.wunderground.com/api",
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)
        self.api_key = api_key

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_conditions(self, country: str, city: str) -> UpstreamResponse:
        """Get current conditions for a location."""
        if not self.is_configured:
            return UpstreamResponse(
                success=False,
                status_code=500,
                error="Weather API key not configured"
            )

        endpoint = (
            f"/{quote(self.api_key, safe='')}/conditions/q/"
            f"{quote(country, safe='')}/{quote(city, safe='')}.json"
        )
        response = self._request(endpoint)
        if not response.success:
            return response

        error = (response.data.get("response") or {}).get("error") if isinstance(response.data, dict) else None
        if error:
            description = error.get("description") if isinstance(error, dict) else str(error)
            return UpstreamResponse(
                success=False,
                status_code=502,
                data=response.data,
                error=f"Weather API error: {description or 'unknown error'}"
            )

        return response
