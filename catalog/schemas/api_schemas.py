"""
API Request/Response Schemas using Pydantic.

Structure of HTTP requests and responses for the catalog API. Catalog shapes
use camelCase field names on the wire; session payloads keep the snake_case
shape identity providers use.
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional, Union
from datetime import datetime

from catalog.domain.attributes import Attribute, AttributeType
from catalog.domain.entities import EntityRecord, EntityTypeRecord, InteractionLogEntry, RequestState, Session


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Attribute schemas
class AttributeSchema(CamelModel):
    name: str = Field(..., min_length=1, max_length=255, description="Attribute name, unique within its list")
    type: AttributeType = Field(AttributeType.STRING, description="Declared value type")
    required: bool = Field(False, description="Whether a value is expected")
    default_value: Optional[Any] = Field(None, description="Default value, typed per `type`")
    is_user_defined: bool = Field(False, description="True if added by the user rather than the schema")
    value: Optional[Any] = Field(None, description="Instance value, typed per `type`")
    not_applicable: bool = Field(False, description="Explicitly marked as not applicable")

    def to_domain(self) -> Attribute:
        return Attribute.build(
            name=self.name,
            type=self.type,
            required=self.required,
            is_user_defined=self.is_user_defined,
            not_applicable=self.not_applicable,
            default_value=self.default_value,
            value=self.value,
        )

    @classmethod
    def from_domain(cls, attr: Attribute) -> "AttributeSchema":
        return cls(
            name=attr.name,
            type=attr.type,
            required=attr.required,
            default_value=attr.default_value,
            is_user_defined=attr.is_user_defined,
            value=attr.value,
            not_applicable=attr.not_applicable,
        )


# Entity type schemas
class EntityTypeCreate(CamelModel):
    id: str = Field(..., min_length=1, max_length=255, description="Unique identifier of the entity type")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    description: Optional[str] = Field(None, max_length=1000, description="Optional description")
    predefined_attributes: List[AttributeSchema] = Field(default_factory=list, description="Schema attributes")

class EntityTypeResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    predefined_attributes: List[AttributeSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, entity_type: EntityTypeRecord) -> "EntityTypeResponse":
        return cls(
            id=entity_type.id,
            name=entity_type.name,
            description=entity_type.description,
            predefined_attributes=[AttributeSchema.from_domain(a) for a in entity_type.predefined_attributes],
        )


# Entity schemas
class EntityCreate(CamelModel):
    id: Optional[str] = Field(None, max_length=255, description="Entity id; generated if omitted")
    type_id: str = Field(..., min_length=1, description="ID of the entity type")
    name: str = Field(..., min_length=1, max_length=255, description="Entity name")
    attributes: List[AttributeSchema] = Field(default_factory=list, description="Attribute values")

class InteractionLogEntrySchema(CamelModel):
    timestamp: datetime
    user_id: str
    action: str
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def from_domain(cls, entry: InteractionLogEntry) -> "InteractionLogEntrySchema":
        return cls(timestamp=entry.timestamp, user_id=entry.user_id, action=entry.action, details=entry.details)

class EntityResponse(CamelModel):
    id: str
    type_id: str
    name: str
    attributes: List[AttributeSchema]
    created_at: datetime
    updated_at: datetime
    owner_id: str
    missing_info_attributes: List[str]
    requested_by_users: List[str]
    interaction_log: List[InteractionLogEntrySchema]

    @classmethod
    def from_domain(cls, entity: EntityRecord) -> "EntityResponse":
        return cls(
            id=entity.id,
            type_id=entity.type_id,
            name=entity.name,
            attributes=[AttributeSchema.from_domain(a) for a in entity.attributes],
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            owner_id=entity.owner_id,
            missing_info_attributes=entity.missing_info_attributes,
            requested_by_users=entity.requested_by_users,
            interaction_log=[InteractionLogEntrySchema.from_domain(e) for e in entity.interaction_log],
        )


# Information request schemas
class RequestInfoPayload(CamelModel):
    message: Optional[str] = Field(None, max_length=5000, description="Free-text message to the owner")
    attribute_names: Optional[List[str]] = Field(None, description="Attributes the requester asks about")

class RequestInfoResponse(CamelModel):
    success: bool = Field(default=True, description="Whether the request was recorded")
    entity_id: str

class RequestStateResponse(CamelModel):
    entity_id: str
    missing_info_attributes: List[str]
    requested_by_users: List[str]
    interaction_log: List[InteractionLogEntrySchema]

    @classmethod
    def from_domain(cls, state: RequestState) -> "RequestStateResponse":
        return cls(
            entity_id=state.entity_id,
            missing_info_attributes=state.missing_info_attributes,
            requested_by_users=state.requested_by_users,
            interaction_log=[InteractionLogEntrySchema.from_domain(e) for e in state.interaction_log],
        )

class MissingInfoResponse(CamelModel):
    entity_id: str
    missing_info_attributes: List[str]


# Marketplace schemas
class MarketplaceSearch(CamelModel):
    type_id: Optional[str] = Field(None, description="Only entities of this type; all types if omitted")
    filters: Dict[str, Union[str, List[str], None]] = Field(
        default_factory=dict,
        description="Attribute name -> text (substring match) or list of values (any of)",
    )

class FilterDescriptor(CamelModel):
    name: str
    type: AttributeType
    values: List[Any]
    widget: str = Field(..., description="tri_state, multi_select or free_text")

class MarketplaceSearchResponse(CamelModel):
    entities: List[EntityResponse]
    filters: List[FilterDescriptor]


# Auth schemas
class SendOtpRequest(BaseModel):
    email: Optional[str] = None

class VerifyOtpRequest(BaseModel):
    email: Optional[str] = None
    token: Optional[str] = None

class MessageResponse(BaseModel):
    message: str

class SessionUser(BaseModel):
    id: str
    email: str

class SessionSchema(BaseModel):
    access_token: str
    token_type: str
    expires_in: int
    user: SessionUser

    @classmethod
    def from_domain(cls, session: Session) -> "SessionSchema":
        return cls(
            access_token=session.access_token,
            token_type=session.token_type,
            expires_in=session.expires_in,
            user=SessionUser(id=session.user.id, email=session.user.email),
        )

class VerifyOtpResponse(BaseModel):
    message: str
    session: SessionSchema
