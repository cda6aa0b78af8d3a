# ============================================================================
# CLAUDE CONTEXT - WEATHER BACKEND
# ============================================================================
# STATUS: Adapter Layer - Weather conditions backend
# PURPOSE: Scalar attributes read from one current-observation object
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: WeatherBackend, parse_location, coerce_number
# DEPENDENCIES: services.weather_client, .base
# ============================================================================
"""
Weather Backend.

The selector is a "Country/City" location path. One conditions lookup is
issued per request; every spec reads its source field (temp_c,
relative_humidity, ...) from the same observation object. The conditions
endpoint returns all observation fields in one document, so multi-attribute
mappings such as the weatherConditions preset cost a single upstream call.

Numeric strings ("71%", " 12.4 ") are converted to numbers.
"""

import math
from typing import Any, Optional, Tuple

from ngsi_proxy.errors import InvalidSelector, SourceFieldNotFound, UnsupportedShape, UpstreamError
from ngsi_proxy.mapping import AttributeSpec, MappingSpec
from services.weather_client import WeatherClient
from .base import BackendAdapter

OBSERVATION_KEY = "current_observation"


def parse_location(selector: Optional[str]) -> Tuple[str, str]:
    """Split "Country/City" into its parts."""
    parts = [part.strip() for part in (selector or "").split("/")]
    if len(parts) != 2 or not all(parts):
        raise InvalidSelector(f"Weather selector must be 'Country/City', got '{selector}'")
    return parts[0], parts[1]


def coerce_number(value: Any) -> Any:
    """Convert numeric strings (optionally with a % suffix) to numbers."""
    if isinstance(value, bool) or not isinstance(value, str):
        return value

    text = value.strip().rstrip("%").strip()
    try:
        number = float(text)
    except ValueError:
        return value

    if number.is_integer() and "." not in text and "e" not in text.lower():
        return int(number)
    return number


class WeatherBackend(BackendAdapter):
    """Backend sourcing scalar attributes from current weather conditions."""

    name = "weather"

    def __init__(self, client: WeatherClient, max_workers: int = 1):
        super().__init__(max_workers=max_workers)
        self.client = client

    def validate(self, specs: MappingSpec, selector: Optional[str]) -> None:
        lists = [spec.ngsi_name for spec in specs if spec.is_list]
        if lists:
            raise UnsupportedShape(
                f"Weather backend only serves scalar attributes; list requested for: {', '.join(lists)}"
            )
        parse_location(selector)

    def prepare(self, selector: Optional[str]) -> dict:
        country, city = parse_location(selector)
        response = self.client.get_conditions(country, city)

        if not response.success:
            self.logger.warning(
                f"Weather lookup failed: {response.error}",
                extra={'custom_dimensions': {'location': selector, 'status_code': response.status_code}}
            )
            raise UpstreamError(response.error, cause=response.exception, backend=self.name)

        observation = response.data.get(OBSERVATION_KEY) if isinstance(response.data, dict) else None
        if not isinstance(observation, dict):
            raise UpstreamError(
                f"Weather payload has no '{OBSERVATION_KEY}' object",
                backend=self.name
            )
        return observation

    def extract_value(self, spec: AttributeSpec, payload: Any, selector: Optional[str]) -> Any:
        if spec.source_field not in payload:
            raise SourceFieldNotFound(
                f"Weather observation for '{selector}' has no field '{spec.source_field}'"
            )

        value = payload[spec.source_field]
        if isinstance(value, (dict, list)) or value is None:
            raise UnsupportedShape(f"Weather field '{spec.source_field}' is not a scalar value")

        number = coerce_number(value)
        if isinstance(number, float) and not math.isfinite(number):
            raise UpstreamError(
                f"Weather field '{spec.source_field}' is not a finite number: {value!r}",
                backend=self.name
            )
        return number

    def close(self) -> None:
        self.client.close()

    def describe(self) -> dict:
        return {**super().describe(), "configured": self.client.is_configured}
