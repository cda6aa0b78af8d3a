# ============================================================================
# CLAUDE CONTEXT - STATIC BACKEND
# ============================================================================
# STATUS: Adapter Layer - Fixed fixture values
# PURPOSE: Deterministic attribute values keyed by (source_field, selector)
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: StaticBackend, DEFAULT_FIXTURES, DEFAULT_SELECTOR, load_fixtures
# DEPENDENCIES: json (fixture file), .base
# ============================================================================

"""
Static Backend.

Looks values up in a read-only table built once at startup. The table is
keyed by (source_field, selector); routes that carry no selector use
DEFAULT_SELECTOR.

Fixture file format (STATIC_FIXTURES_PATH), entries overlay the defaults:

    {
        "default": {"temperature": 21.7, "tweets": ["a", "b"]},
        "Germany/Berlin": {"temp_c": 12.4}
    }
"""

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ngsi_proxy.errors import FixtureNotFound, UnsupportedShape
from ngsi_proxy.mapping import AttributeSpec
from .base import BackendAdapter

DEFAULT_SELECTOR = "default"

FixtureKey = Tuple[str, str]

DEFAULT_FIXTURES: Dict[FixtureKey, Any] = {
    ("temperature", DEFAULT_SELECTOR): 21.7,
    ("relativeHumidity", DEFAULT_SELECTOR): 64,
    ("humidity", DEFAULT_SELECTOR): 64,
    ("pressure", DEFAULT_SELECTOR): 1013.2,
    ("tweets", DEFAULT_SELECTOR): [
        "FIWARE context broker now serving live sensor data",
        "Smart city pilot publishes open weather readings",
        "Building NGSI proxies for legacy data sources",
    ],
    ("temperature", "Germany/Berlin"): 12.4,
    ("relativeHumidity", "Germany/Berlin"): 71,
    ("temp_c", "Germany/Berlin"): 12.4,
    ("relative_humidity", "Germany/Berlin"): 71,
    ("temperature", "Spain/Madrid"): 24.1,
    ("relativeHumidity", "Spain/Madrid"): 38,
    ("temp_c", "Spain/Madrid"): 24.1,
    ("relative_humidity", "Spain/Madrid"): 38,
}


def load_fixtures(path: Path) -> Dict[FixtureKey, Any]:
    """
    Load a fixture file into a (source_field, selector) table.

    Raises:
        ValueError: File does not contain a selector -> {field: value} mapping
    """
    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Fixture file {path} must contain a JSON object at top level")

    fixtures: Dict[FixtureKey, Any] = {}
    for selector, fields in data.items():
        if not isinstance(fields, dict):
            raise ValueError(f"Fixture file {path}: entry '{selector}' must be an object")
        for source_field, value in fields.items():
            fixtures[(source_field, selector)] = value
    return fixtures


class StaticBackend(BackendAdapter):
    """Backend serving fixed fixture values."""

    name = "static"

    def __init__(
        self,
        fixtures: Optional[Mapping[FixtureKey, Any]] = None,
        default_selector: str = DEFAULT_SELECTOR,
        max_workers: int = 1
    ):
        super().__init__(max_workers=max_workers)
        table = dict(DEFAULT_FIXTURES if fixtures is None else fixtures)
        # Freeze nested lists so callers cannot mutate shared fixtures
        self._fixtures = MappingProxyType({
            key: tuple(value) if isinstance(value, list) else value
            for key, value in table.items()
        })
        self.default_selector = default_selector

    @classmethod
    def from_file(cls, path: Optional[Path], **kwargs) -> "StaticBackend":
        """Default fixtures overlaid with the entries of `path` (if given)."""
        table = dict(DEFAULT_FIXTURES)
        if path:
            table.update(load_fixtures(path))
        return cls(fixtures=table, **kwargs)

    @property
    def fixtures(self) -> Mapping[FixtureKey, Any]:
        return self._fixtures

    def lookup(self, source_field: str, selector: Optional[str]) -> Any:
        key = (source_field, selector or self.default_selector)
        if key not in self._fixtures:
            raise FixtureNotFound(f"No fixture for field '{key[0]}' and selector '{key[1]}'")
        return self._fixtures[key]

    def extract_value(self, spec: AttributeSpec, payload: Any, selector: Optional[str]) -> Any:
        value = self.lookup(spec.source_field, selector)
        is_sequence = isinstance(value, tuple)

        if spec.is_list != is_sequence:
            expected = "list" if spec.is_list else "scalar"
            raise UnsupportedShape(
                f"Fixture for '{spec.source_field}' is not a {expected} value"
            )

        return list(value) if is_sequence else value

    def describe(self) -> dict:
        return {**super().describe(), "fixtures": len(self._fixtures)}
