"""Domain events for decoupled side effects and integrations."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for all domain events."""
    aggregate_id: str
    event_id: str = field(default="", kw_only=True)
    timestamp: datetime | None = field(default=None, kw_only=True)

    def __post_init__(self):
        if not self.event_id:
            self.event_id = str(uuid4())
        if not self.timestamp:
            self.timestamp = datetime.now()


@dataclass
class EntityTypeRegistered(DomainEvent):
    """Raised when a new entity type is registered."""
    name: str


@dataclass
class EntityCreated(DomainEvent):
    """Raised when a new entity is created."""
    type_id: str
    owner_id: str
    missing_info_attributes: List[str]


@dataclass
class InfoRequested(DomainEvent):
    """Raised when a user asks the owner for more information."""
    requesting_user_id: str
    attribute_names: List[str]


@dataclass
class OtpIssued(DomainEvent):
    """Raised when a one-time code is emailed."""
    email: str


@dataclass
class UserSignedIn(DomainEvent):
    """Raised when a one-time code is verified and a session issued."""
    email: str
    created: bool


class DomainEventPublisher:
    """Singleton publisher for domain events."""

    _instance: DomainEventPublisher | None = None
    _subscribers: Dict[type, List[Callable[[DomainEvent], None]]]

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._subscribers = {}
        return cls._instance

    def subscribe(self, event_type: type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        event_type = type(event)
        for handler in self._subscribers.get(event_type, []):
            try:
                handler(event)
            except Exception:
                # Handler failures never fail the main operation
                logger.exception(f"Event handler error for {event_type.__name__}")

    def clear_subscribers(self) -> None:
        """Clear all subscribers (useful for testing)."""
        self._subscribers = {}


# Singleton instance
event_publisher = DomainEventPublisher()
