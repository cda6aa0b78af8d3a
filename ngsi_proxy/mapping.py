# ============================================================================
# CLAUDE CONTEXT - MAPPING PARSER
# ============================================================================
# STATUS: Standalone Module - Mapping string grammar
# PURPOSE: Parse route type/mapping parameters into ordered attribute specs
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AttributeShape, AttributeSpec, MappingSpec, parse_mapping, format_mapping
# DEPENDENCIES: .errors, util_logger
# ============================================================================

"""
Mapping Parser

Grammar:
    mapping := unit (',' unit)*
    unit    := name | name ':' alias

`alias` equal to the literal "array" forces a list-shaped attribute read
from a source field of the same name. Any other alias names the
backend-native source field. Whitespace around separators is ignored.

Examples:
    >>> parse_mapping("number", "temperature:temp_c,relativeHumidity:relative_humidity")
    (AttributeSpec(ngsi_name='temperature', source_field='temp_c', shape=<AttributeShape.SCALAR: 'scalar'>),
     AttributeSpec(ngsi_name='relativeHumidity', source_field='relative_humidity', shape=<AttributeShape.SCALAR: 'scalar'>))
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .errors import DuplicateAttribute, InvalidMapping
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.PARSER, "MappingParser")

UNIT_SEPARATOR = ","
ALIAS_SEPARATOR = ":"
ARRAY_ALIAS = "array"


class AttributeShape(str, Enum):
    """Value shape of an NGSI attribute."""
    SCALAR = "scalar"
    LIST = "list"


# Route `type` parameter -> default shape
TYPE_SHAPES = {
    "number": AttributeShape.SCALAR,
    "list": AttributeShape.LIST,
}


@dataclass(frozen=True)
class AttributeSpec:
    """One parsed mapping unit."""
    ngsi_name: str
    source_field: str
    shape: AttributeShape

    @property
    def is_list(self) -> bool:
        return self.shape is AttributeShape.LIST


MappingSpec = Tuple[AttributeSpec, ...]


def _shape_for_type(type_name: str) -> AttributeShape:
    shape = TYPE_SHAPES.get((type_name or "").strip())
    if shape is None:
        raise InvalidMapping(
            f"Unknown attribute type '{type_name}'. Expected one of: {', '.join(TYPE_SHAPES)}"
        )
    return shape


def _parse_unit(unit: str, default_shape: AttributeShape) -> AttributeSpec:
    parts = [part.strip() for part in unit.split(ALIAS_SEPARATOR)]

    if len(parts) > 2:
        raise InvalidMapping(f"Invalid mapping unit '{unit.strip()}': more than one '{ALIAS_SEPARATOR}'")

    name = parts[0]
    if not name:
        raise InvalidMapping(f"Invalid mapping unit '{unit.strip()}': empty attribute name")

    if len(parts) == 1:
        return AttributeSpec(ngsi_name=name, source_field=name, shape=default_shape)

    alias = parts[1]
    if not alias:
        raise InvalidMapping(f"Invalid mapping unit '{unit.strip()}': empty alias")

    if alias == ARRAY_ALIAS:
        return AttributeSpec(ngsi_name=name, source_field=name, shape=AttributeShape.LIST)

    return AttributeSpec(ngsi_name=name, source_field=alias, shape=default_shape)


def parse_mapping(type_name: str, mapping: str) -> MappingSpec:
    """
    Parse the `type` and `mapping` route parameters.

    Args:
        type_name: "number" (scalar attributes) or "list" (list attributes)
        mapping: Comma separated mapping units

    Returns:
        Tuple of AttributeSpec in mapping order

    Raises:
        InvalidMapping: Empty mapping/unit, malformed unit or unknown type
        DuplicateAttribute: The same attribute name appears more than once
    """
    default_shape = _shape_for_type(type_name)

    if mapping is None or not mapping.strip():
        raise InvalidMapping("Mapping must not be empty")

    specs = []
    seen = set()
    for unit in mapping.split(UNIT_SEPARATOR):
        if not unit.strip():
            raise InvalidMapping(f"Invalid mapping '{mapping}': empty unit")

        spec = _parse_unit(unit, default_shape)
        if spec.ngsi_name in seen:
            raise DuplicateAttribute(f"Attribute '{spec.ngsi_name}' is mapped more than once")
        seen.add(spec.ngsi_name)
        specs.append(spec)

    logger.debug(
        f"Parsed {len(specs)} attributes from mapping '{mapping}'",
        extra={'custom_dimensions': {'type': type_name, 'attributes': sorted(seen)}}
    )
    return tuple(specs)


def format_mapping(specs: MappingSpec) -> str:
    """
    Serialize attribute specs back into the mapping grammar.

    List attributes read from a same-named field are written with the
    explicit `:array` suffix so they keep their shape under either type.
    """
    units = []
    for spec in specs:
        if spec.source_field == spec.ngsi_name:
            if spec.is_list:
                units.append(f"{spec.ngsi_name}{ALIAS_SEPARATOR}{ARRAY_ALIAS}")
            else:
                units.append(spec.ngsi_name)
        else:
            units.append(f"{spec.ngsi_name}{ALIAS_SEPARATOR}{spec.source_field}")
    return UNIT_SEPARATOR.join(units)
