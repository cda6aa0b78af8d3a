# ============================================================================
# CLAUDE CONTEXT - RANDOM BACKEND
# ============================================================================
# STATUS: Adapter Layer - Synthetic values
# PURPOSE: Random attribute values with no external dependency
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: RandomBackend, FIELD_RANGES, DEFAULT_RANGE
# DEPENDENCIES: random, .base
# ============================================================================
"""
Random Backend.

Synthetic values with no external dependency. The selector is ignored.

Scalar attributes get a uniformly distributed number in a range chosen by
source field; unknown fields use [0, 100]. List attributes get a fixed
number of synthetic strings.
"""

import random
from typing import Any, Optional

from ngsi_proxy.mapping import AttributeSpec
from .base import BackendAdapter

# source_field -> (low, high)
FIELD_RANGES = {
    "temperature": (-10.0, 40.0),
    "temp_c": (-10.0, 40.0),
    "relativeHumidity": (0.0, 100.0),
    "relative_humidity": (0.0, 100.0),
    "humidity": (0.0, 100.0),
    "pressure": (950.0, 1050.0),
    "windSpeed": (0.0, 30.0),
}
DEFAULT_RANGE = (0.0, 100.0)

DEFAULT_LIST_LENGTH = 3

_WORDS = (
    "sensor", "context", "broker", "entity", "city", "smart", "data",
    "open", "platform", "device", "street", "weather", "reading", "update",
)


class RandomBackend(BackendAdapter):
    """Backend producing random attribute values."""

    name = "random"

    def __init__(
        self,
        list_length: int = DEFAULT_LIST_LENGTH,
        rng: Optional[random.Random] = None,
        max_workers: int = 1
    ):
        super().__init__(max_workers=max_workers)
        if list_length < 1:
            raise ValueError(f"list_length must be positive, got {list_length}")
        self.list_length = list_length
        self._rng = rng or random.Random()

    @staticmethod
    def range_for(source_field: str):
        return FIELD_RANGES.get(source_field, DEFAULT_RANGE)

    def _number(self, source_field: str) -> float:
        low, high = self.range_for(source_field)
        value = round(self._rng.uniform(low, high), 2)
        return min(max(value, low), high)

    def _sentence(self, source_field: str) -> str:
        words = self._rng.sample(_WORDS, 4)
        return f"{source_field} #{self._rng.randint(1, 9999)}: {' '.join(words)}"

    def extract_value(self, spec: AttributeSpec, payload: Any, selector: Optional[str]) -> Any:
        if spec.is_list:
            return [self._sentence(spec.source_field) for _ in range(self.list_length)]
        return self._number(spec.source_field)

    def describe(self) -> dict:
        return {**super().describe(), "list_length": self.list_length}
