"""Services for registering entity types and creating entities."""
from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Sequence

from catalog.domain.attributes import Attribute, ensure_unique_names, missing_required_attributes
from catalog.domain.entities import EntityRecord, EntityTypeRecord, utcnow
from catalog.domain.errors import NotFoundError, ValidationError
from catalog.domain.events import EntityCreated, EntityTypeRegistered, event_publisher
from catalog.domain.ports import EntityStore, EntityTypeStore

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], label: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{label} is required and cannot be empty")
    return value.strip()


class EntityTypeRegistry:
    """Registers entity types; types are immutable once created."""

    def __init__(self, store: EntityTypeStore) -> None:
        self._store = store

    def create_entity_type(
        self,
        type_id: str,
        name: str,
        description: Optional[str] = None,
        predefined_attributes: Sequence[Attribute] = (),
    ) -> EntityTypeRecord:
        type_id = _require_text(type_id, "Entity type id")
        name = _require_text(name, "Entity type name")
        attributes = [attr.definition() for attr in predefined_attributes]
        ensure_unique_names(attributes)

        entity_type = self._store.create_entity_type(EntityTypeRecord(
            id=type_id,
            name=name,
            description=description.strip() if description else None,
            predefined_attributes=attributes,
        ))

        event_publisher.publish(EntityTypeRegistered(aggregate_id=entity_type.id, name=entity_type.name))
        return entity_type

    def list_entity_types(self) -> List[EntityTypeRecord]:
        return self._store.get_all_entity_types()

    def get_entity_type(self, type_id: str) -> EntityTypeRecord:
        entity_type = self._store.get_entity_type(type_id)
        if not entity_type:
            raise NotFoundError(f"Entity type not found: {type_id}")
        return entity_type


class EntityRegistry:
    """Creates and reads entities.

    Predefined attributes of the entity's type that the caller did not send are
    copied in without a value, so they take part in the missing-info check.
    ``missing_info_attributes`` is computed here once and stored as a
    point-in-time record.
    """

    def __init__(self, store: EntityStore, types: EntityTypeStore) -> None:
        self._store = store
        self._types = types

    def create_entity(
        self,
        owner_id: str,
        type_id: str,
        name: str,
        attributes: Sequence[Attribute] = (),
        entity_id: Optional[str] = None,
    ) -> EntityRecord:
        type_id = _require_text(type_id, "Entity type id")
        name = _require_text(name, "Entity name")
        entity_id = entity_id.strip() if entity_id and entity_id.strip() else str(uuid.uuid4())

        attributes = list(attributes)
        ensure_unique_names(attributes)

        entity_type = self._types.get_entity_type(type_id)
        if entity_type is None:
            logger.warning(f"Creating entity {entity_id} with unknown entity type {type_id}")
        else:
            supplied = {attr.name for attr in attributes}
            attributes.extend(
                attr.definition()
                for attr in entity_type.predefined_attributes
                if attr.name not in supplied
            )

        now = utcnow()
        entity = self._store.create_entity(EntityRecord(
            id=entity_id,
            type_id=type_id,
            name=name,
            owner_id=owner_id,
            attributes=attributes,
            created_at=now,
            updated_at=now,
            missing_info_attributes=missing_required_attributes(attributes),
        ))

        event_publisher.publish(EntityCreated(
            aggregate_id=entity.id,
            type_id=entity.type_id,
            owner_id=entity.owner_id,
            missing_info_attributes=entity.missing_info_attributes,
        ))
        return entity

    def get_entity(self, entity_id: str) -> EntityRecord:
        entity = self._store.get_entity(entity_id)
        if not entity:
            raise NotFoundError(f"Entity not found: {entity_id}")
        return entity

    def list_owner_entities(self, owner_id: str) -> List[EntityRecord]:
        return self._store.get_owner_entities(owner_id)

    def list_all_entities(self) -> List[EntityRecord]:
        return self._store.get_all_entities()
