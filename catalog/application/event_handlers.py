"""Event handlers for domain events."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from catalog.domain.events import (
        EntityTypeRegistered,
        EntityCreated,
        InfoRequested,
        OtpIssued,
        UserSignedIn,
    )

logger = logging.getLogger(__name__)


class AuditLogHandler:
    """Logs all domain events for audit trail."""

    def handle_entity_type_registered(self, event: EntityTypeRegistered) -> None:
        logger.info(f"[AUDIT] Entity type registered: {event.aggregate_id} - {event.name}")

    def handle_entity_created(self, event: EntityCreated) -> None:
        logger.info(
            f"[AUDIT] Entity created: {event.aggregate_id} ({event.type_id}) by {event.owner_id}"
        )

    def handle_info_requested(self, event: InfoRequested) -> None:
        logger.info(
            f"[AUDIT] Info requested on {event.aggregate_id} by {event.requesting_user_id}: "
            f"{', '.join(event.attribute_names) or 'general request'}"
        )

    def handle_otp_issued(self, event: OtpIssued) -> None:
        logger.info(f"[AUDIT] OTP issued for {event.email}")

    def handle_user_signed_in(self, event: UserSignedIn) -> None:
        logger.info(f"[AUDIT] User signed in: {event.aggregate_id} ({'new' if event.created else 'returning'})")


class MissingInfoHandler:
    """Flags entities created with missing required attributes."""

    def handle_entity_created(self, event: EntityCreated) -> None:
        if event.missing_info_attributes:
            logger.warning(
                f"[MISSING_INFO] Entity {event.aggregate_id} created without: "
                f"{', '.join(event.missing_info_attributes)}"
            )


def register_event_handlers():
    """Register all event handlers with the publisher."""
    from catalog.domain.events import (
        event_publisher,
        EntityTypeRegistered,
        EntityCreated,
        InfoRequested,
        OtpIssued,
        UserSignedIn,
    )

    # Startup may run more than once per process (tests); start from a clean slate
    event_publisher.clear_subscribers()

    audit = AuditLogHandler()
    missing_info = MissingInfoHandler()

    # Audit handlers (all events)
    event_publisher.subscribe(EntityTypeRegistered, audit.handle_entity_type_registered)
    event_publisher.subscribe(EntityCreated, audit.handle_entity_created)
    event_publisher.subscribe(InfoRequested, audit.handle_info_requested)
    event_publisher.subscribe(OtpIssued, audit.handle_otp_issued)
    event_publisher.subscribe(UserSignedIn, audit.handle_user_signed_in)

    event_publisher.subscribe(EntityCreated, missing_info.handle_entity_created)
