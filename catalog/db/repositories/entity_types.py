from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from catalog.db.models import EntityType
from catalog.domain.attributes import Attribute
from catalog.domain.entities import EntityTypeRecord
from catalog.domain.errors import ConflictError, UpstreamError
from typing import List, Optional


def to_entity_type_record(row: EntityType) -> EntityTypeRecord:
    return EntityTypeRecord(
        id=row.id,
        name=row.name,
        description=row.description,
        predefined_attributes=[Attribute.from_document(doc) for doc in row.predefined_attributes or []],
    )


class EntityTypeRepository:
    """Repository for entity type operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_entity_type(self, entity_type: EntityTypeRecord) -> EntityTypeRecord:
        """
        Register a new entity type.

        Args:
            entity_type: Type definition; its id must not be registered yet

        Returns:
            Created entity type

        Raises:
            ConflictError: If an entity type with the same id exists
            UpstreamError: If the store fails
        """
        if self.db.get(EntityType, entity_type.id) is not None:
            raise ConflictError(f"Entity type already exists: {entity_type.id}")

        row = EntityType(
            id=entity_type.id,
            name=entity_type.name,
            description=entity_type.description,
            predefined_attributes=[attr.to_document() for attr in entity_type.predefined_attributes],
        )
        try:
            self.db.add(row)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Entity type already exists: {entity_type.id}") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to store entity type", cause=e) from e
        self.db.refresh(row)
        return to_entity_type_record(row)

    def get_entity_type(self, type_id: str) -> Optional[EntityTypeRecord]:
        """
        Get an entity type by ID.

        Returns:
            Entity type if found, None otherwise
        """
        row = self.db.query(EntityType).filter(EntityType.id == type_id).first()
        return to_entity_type_record(row) if row else None

    def get_all_entity_types(self) -> List[EntityTypeRecord]:
        """Get all entity types, oldest first."""
        rows = self.db.query(EntityType).order_by(EntityType.created_at, EntityType.id).all()
        return [to_entity_type_record(row) for row in rows]
