# ============================================================================
# CLAUDE CONTEXT - NGSI MODELS
# ============================================================================
# STATUS: Standalone Models - NGSI v1 queryContext request/response models
# PURPOSE: Pydantic models for the context-broker envelope
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ContextAttribute, ContextElement, StatusCode, ContextElementResponse,
#          QueryContextResponse, EntityRef, QueryContextRequest
# INTERFACES: Pydantic BaseModel
# PYDANTIC_MODELS: All classes in this file
# DEPENDENCIES: pydantic, typing
# SOURCE: FIWARE NGSI v1 queryContext operation
# PATTERNS: Data Transfer Objects (DTOs)
# ============================================================================

"""
NGSI v1 queryContext Pydantic Models

Response models are frozen: a response is built once per request and never
mutated afterwards. Field names follow the NGSI v1 wire format (camelCase).

Response shape:
    {
      "contextResponses": [
        {
          "contextElement": {
            "type": "<entityType>",
            "isPattern": "false",
            "id": "<entityId>",
            "attributes": [{"name": ..., "type": "number"|"array", "value": ...}]
          },
          "statusCode": {"code": "200", "reasonPhrase": "OK"}
        }
      ]
    }
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

# Strict members keep booleans and numbers as the backend produced them
Scalar = Union[StrictBool, StrictInt, StrictFloat, StrictStr]
AttributeValue = Union[Scalar, List[Scalar]]


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class ContextAttribute(_FrozenModel):
    """A single NGSI attribute."""
    name: str = Field(description="Attribute name exposed to the consumer")
    type: str = Field(description="NGSI attribute type (number, boolean, string, array)")
    value: AttributeValue = Field(description="Scalar value or ordered list of scalars")


class ContextElement(_FrozenModel):
    """Entity with its attributes."""
    type: str = Field(description="Entity type")
    isPattern: str = Field(default="false", description="NGSI v1 encodes booleans as strings")
    id: str = Field(description="Entity id")
    attributes: List[ContextAttribute] = Field(default_factory=list)


class StatusCode(_FrozenModel):
    """NGSI status code; code is serialized as a string."""
    code: str
    reasonPhrase: str
    details: Optional[str] = Field(default=None, description="Error details (errors only)")


class ContextElementResponse(_FrozenModel):
    contextElement: ContextElement
    statusCode: StatusCode


class QueryContextResponse(_FrozenModel):
    """Top-level queryContext response envelope."""
    contextResponses: List[ContextElementResponse]

    @property
    def status_code(self) -> int:
        return int(self.contextResponses[0].statusCode.code)

    @property
    def attributes(self) -> List[ContextAttribute]:
        return self.contextResponses[0].contextElement.attributes

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire format, dropping unset optional fields."""
        return self.model_dump(exclude_none=True)


# ============================================================================
# Request models
# ============================================================================

class EntityRef(BaseModel):
    """Entity named in a queryContext request."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str] = None
    type: Optional[str] = None
    is_pattern: Union[bool, str] = Field(default=False, alias="isPattern")


class QueryContextRequest(BaseModel):
    """Body of an inbound queryContext request. Only `entities` is used."""
    entities: List[EntityRef] = Field(default_factory=list)
    attributes: List[str] = Field(default_factory=list)

    def first_entity(self) -> Optional[EntityRef]:
        return self.entities[0] if self.entities else None
