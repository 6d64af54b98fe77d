"""Internal domain records passed between repositories, services and routers."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from catalog.domain.attributes import Attribute

ATTRIBUTE_REQUESTED = "attribute_requested"


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class InteractionLogEntry:
    timestamp: datetime
    user_id: str
    action: str
    details: Optional[Dict[str, Any]] = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "user_id": self.user_id,
            "action": self.action,
            "details": self.details,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> InteractionLogEntry:
        return cls(
            timestamp=datetime.fromisoformat(doc["timestamp"]),
            user_id=doc["user_id"],
            action=doc["action"],
            details=doc.get("details"),
        )


@dataclass
class EntityTypeRecord:
    id: str
    name: str
    description: Optional[str] = None
    predefined_attributes: List[Attribute] = field(default_factory=list)


@dataclass
class EntityRecord:
    id: str
    type_id: str
    name: str
    owner_id: str
    attributes: List[Attribute] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    missing_info_attributes: List[str] = field(default_factory=list)
    requested_by_users: List[str] = field(default_factory=list)
    interaction_log: List[InteractionLogEntry] = field(default_factory=list)

    def attribute(self, name: str) -> Optional[Attribute]:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None


@dataclass(frozen=True)
class UserRecord:
    id: str
    email: str
    created_at: datetime


@dataclass(frozen=True)
class RequestState:
    """What the owner sees about information requests on an entity."""
    entity_id: str
    missing_info_attributes: List[str]
    requested_by_users: List[str]
    interaction_log: List[InteractionLogEntry]


@dataclass(frozen=True)
class Session:
    access_token: str
    token_type: str
    expires_in: int
    user: UserRecord
