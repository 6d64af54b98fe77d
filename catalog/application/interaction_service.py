"""Information requests against entities and the owner's view of them."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from catalog.domain.entities import (
    ATTRIBUTE_REQUESTED,
    EntityRecord,
    InteractionLogEntry,
    RequestState,
    utcnow,
)
from catalog.domain.errors import ForbiddenError, NotFoundError, ValidationError
from catalog.domain.events import InfoRequested, event_publisher
from catalog.domain.ports import EntityStore

logger = logging.getLogger(__name__)


class InteractionTracker:
    """Records information requests and exposes the accumulated state.

    Any authenticated user may request information, the owner included.
    Attribute names are recorded as given; they are not checked against the
    entity's type.
    """

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    def request_info(
        self,
        entity_id: str,
        requesting_user_id: str,
        message: Optional[str] = None,
        attribute_names: Optional[Sequence[str]] = None,
    ) -> EntityRecord:
        """
        Record that a user asked the owner for more information.

        Adds the user to ``requested_by_users`` (once) and appends one
        ``attribute_requested`` log entry, in a single store update.

        Raises:
            ValidationError: If the requesting user id is empty
            NotFoundError: If the entity does not exist
        """
        if not requesting_user_id:
            raise ValidationError("Requesting user id is required")

        names = list(attribute_names or [])
        entry = InteractionLogEntry(
            timestamp=utcnow(),
            user_id=requesting_user_id,
            action=ATTRIBUTE_REQUESTED,
            details={"message": message, "attributeNames": names},
        )

        entity = self._store.record_info_request(entity_id, requesting_user_id, entry)
        if entity is None:
            raise NotFoundError(f"Entity not found: {entity_id}")

        logger.info(f"User {requesting_user_id} requested info on entity {entity_id}: {names}")
        event_publisher.publish(InfoRequested(
            aggregate_id=entity_id,
            requesting_user_id=requesting_user_id,
            attribute_names=names,
        ))
        return entity

    def missing_info(self, entity_id: str) -> List[str]:
        """Missing required attributes as recorded when the entity was created."""
        entity = self._store.get_entity(entity_id)
        if not entity:
            raise NotFoundError(f"Entity not found: {entity_id}")
        return list(entity.missing_info_attributes)

    def request_state(self, entity_id: str, caller_id: str) -> RequestState:
        """
        The owner's view of requests on an entity.

        Raises:
            NotFoundError: If the entity does not exist
            ForbiddenError: If the caller is not the owner
        """
        entity = self._store.get_entity(entity_id)
        if not entity:
            raise NotFoundError(f"Entity not found: {entity_id}")
        if entity.owner_id != caller_id:
            raise ForbiddenError("Only the owner can view requests on this entity")

        return RequestState(
            entity_id=entity.id,
            missing_info_attributes=list(entity.missing_info_attributes),
            requested_by_users=list(entity.requested_by_users),
            interaction_log=list(entity.interaction_log),
        )
