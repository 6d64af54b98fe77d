"""Abstractions the application services depend on."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from catalog.domain.entities import (
    EntityRecord,
    EntityTypeRecord,
    InteractionLogEntry,
    UserRecord,
)


class EntityTypeStore(Protocol):
    def create_entity_type(self, entity_type: EntityTypeRecord) -> EntityTypeRecord: ...

    def get_entity_type(self, type_id: str) -> Optional[EntityTypeRecord]: ...

    def get_all_entity_types(self) -> List[EntityTypeRecord]: ...


class EntityStore(Protocol):
    def create_entity(self, entity: EntityRecord) -> EntityRecord: ...

    def get_entity(self, entity_id: str) -> Optional[EntityRecord]: ...

    def get_all_entities(self) -> List[EntityRecord]: ...

    def get_owner_entities(self, owner_id: str) -> List[EntityRecord]: ...

    def record_info_request(
        self, entity_id: str, user_id: str, entry: InteractionLogEntry
    ) -> Optional[EntityRecord]:
        """Add the user to requested_by_users and append the entry in one update.

        Returns None (and writes nothing) if the entity does not exist.
        """
        ...


class UserStore(Protocol):
    def get_or_create_user(self, email: str) -> tuple[UserRecord, bool]: ...


class OneTimeCodeStore(Protocol):
    def put_code(self, email: str, code: str, expires_at: datetime) -> None: ...

    def get_code(self, email: str) -> Optional[tuple[str, datetime]]: ...

    def delete_code(self, email: str) -> None: ...


class EmailSender(Protocol):
    def send(self, sender: str, to: str, subject: str, html: str) -> None:
        """Deliver one message; raises UpstreamError on failure."""
        ...


class CredentialVerifier(Protocol):
    name: str

    def verify(self, token: str) -> str:
        """Return the user id for a bearer token.

        Raises AuthError if the token is not accepted, UpstreamError if the
        provider could not be reached.
        """
        ...
