from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from catalog.db.models import Entity
from catalog.domain.attributes import Attribute
from catalog.domain.entities import EntityRecord, InteractionLogEntry
from catalog.domain.errors import ConflictError, UpstreamError
from typing import List, Optional


def to_entity_record(row: Entity) -> EntityRecord:
    return EntityRecord(
        id=row.id,
        type_id=row.type_id,
        name=row.name,
        owner_id=row.owner_id,
        attributes=[Attribute.from_document(doc) for doc in row.attributes or []],
        created_at=row.created_at,
        updated_at=row.updated_at,
        missing_info_attributes=list(row.missing_info_attributes or []),
        requested_by_users=list(row.requested_by_users or []),
        interaction_log=[InteractionLogEntry.from_document(doc) for doc in row.interaction_log or []],
    )


class EntityRepository:
    """Repository for entity operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_entity(self, entity: EntityRecord) -> EntityRecord:
        """
        Store a new entity.

        Args:
            entity: Entity to insert; its id must be unused

        Returns:
            Created entity

        Raises:
            ConflictError: If an entity with the same id exists
            UpstreamError: If the store fails
        """
        if self.db.get(Entity, entity.id) is not None:
            raise ConflictError(f"Entity already exists: {entity.id}")

        row = Entity(
            id=entity.id,
            type_id=entity.type_id,
            name=entity.name,
            owner_id=entity.owner_id,
            attributes=[attr.to_document() for attr in entity.attributes],
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            missing_info_attributes=list(entity.missing_info_attributes),
            requested_by_users=list(entity.requested_by_users),
            interaction_log=[entry.to_document() for entry in entity.interaction_log],
        )
        try:
            self.db.add(row)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Entity already exists: {entity.id}") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to store entity", cause=e) from e
        self.db.refresh(row)
        return to_entity_record(row)

    def get_entity(self, entity_id: str) -> Optional[EntityRecord]:
        """
        Get an entity by ID.

        Returns:
            Entity if found, None otherwise
        """
        row = self.db.query(Entity).filter(Entity.id == entity_id).first()
        return to_entity_record(row) if row else None

    def get_all_entities(self) -> List[EntityRecord]:
        """Get all entities, oldest first."""
        rows = self.db.query(Entity).order_by(Entity.created_at, Entity.id).all()
        return [to_entity_record(row) for row in rows]

    def get_owner_entities(self, owner_id: str) -> List[EntityRecord]:
        """Get the entities owned by a user, oldest first."""
        rows = (
            self.db.query(Entity)
            .filter(Entity.owner_id == owner_id)
            .order_by(Entity.created_at, Entity.id)
            .all()
        )
        return [to_entity_record(row) for row in rows]

    def record_info_request(
        self, entity_id: str, user_id: str, entry: InteractionLogEntry
    ) -> Optional[EntityRecord]:
        """
        Add a requesting user and append a log entry in a single transaction.

        The row is locked for update so concurrent requests serialize; both
        columns are written by one commit, or neither is.

        Args:
            entity_id: Entity ID
            user_id: Requesting user ID (added once)
            entry: Interaction log entry to append

        Returns:
            Updated entity, or None if the entity does not exist
        """
        try:
            row = (
                self.db.query(Entity)
                .filter(Entity.id == entity_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if row is None:
                self.db.rollback()
                return None

            requested = list(row.requested_by_users or [])
            if user_id not in requested:
                requested.append(user_id)
            # Reassign the JSON columns so the change is flushed
            row.requested_by_users = requested
            row.interaction_log = list(row.interaction_log or []) + [entry.to_document()]
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to record information request", cause=e) from e

        self.db.refresh(row)
        return to_entity_record(row)
