"""Tests for domain events and event handling."""
from __future__ import annotations

import logging
from datetime import datetime
from unittest.mock import Mock

import pytest

from catalog.application.event_handlers import register_event_handlers
from catalog.domain.events import (
    DomainEventPublisher,
    EntityCreated,
    InfoRequested,
    event_publisher,
)


@pytest.fixture(autouse=True)
def clean_publisher():
    event_publisher.clear_subscribers()
    yield
    event_publisher.clear_subscribers()


class TestDomainEvent:
    """Test base domain event functionality."""

    def test_defaults_are_filled_in(self):
        """Test defaults are filled in."""
        event = InfoRequested(aggregate_id="entity-1", requesting_user_id="u1", attribute_names=["vin"])

        assert event.event_id
        assert isinstance(event.timestamp, datetime)
        assert event.aggregate_id == "entity-1"

    def test_custom_values_are_kept(self):
        """Test custom values are kept."""
        stamp = datetime(2024, 1, 1, 12, 0, 0)
        event = EntityCreated(
            aggregate_id="entity-1",
            type_id="car",
            owner_id="u1",
            missing_info_attributes=[],
            event_id="custom-id",
            timestamp=stamp,
        )

        assert event.event_id == "custom-id"
        assert event.timestamp == stamp


class TestDomainEventPublisher:
    """Test the singleton publisher."""

    def test_singleton(self):
        """Test the publisher is a singleton."""
        assert DomainEventPublisher() is event_publisher

    def test_publish_reaches_subscribers_of_the_event_type_only(self):
        """Test publish reaches subscribers of the event type only."""
        info_handler = Mock()
        created_handler = Mock()
        event_publisher.subscribe(InfoRequested, info_handler)
        event_publisher.subscribe(EntityCreated, created_handler)

        event = InfoRequested(aggregate_id="entity-1", requesting_user_id="u1", attribute_names=[])
        event_publisher.publish(event)

        info_handler.assert_called_once_with(event)
        created_handler.assert_not_called()

    def test_handler_failure_does_not_propagate(self, caplog):
        """Test handler failure does not propagate."""
        failing = Mock(side_effect=RuntimeError("boom"))
        after = Mock()
        event_publisher.subscribe(InfoRequested, failing)
        event_publisher.subscribe(InfoRequested, after)

        with caplog.at_level(logging.ERROR):
            event_publisher.publish(
                InfoRequested(aggregate_id="entity-1", requesting_user_id="u1", attribute_names=[])
            )

        after.assert_called_once()
        assert "Event handler error" in caplog.text


class TestEventHandlers:
    """Test the registered audit handlers."""

    def test_audit_log_for_info_request(self, caplog):
        """Test audit log for info request."""
        register_event_handlers()

        with caplog.at_level(logging.INFO, logger="catalog.application.event_handlers"):
            event_publisher.publish(
                InfoRequested(aggregate_id="entity-1", requesting_user_id="u2", attribute_names=["vin", "year"])
            )

        assert "[AUDIT] Info requested on entity-1 by u2: vin, year" in caplog.text

    def test_missing_info_warning_on_creation(self, caplog):
        """Test missing info warning on creation."""
        register_event_handlers()

        with caplog.at_level(logging.WARNING, logger="catalog.application.event_handlers"):
            event_publisher.publish(EntityCreated(
                aggregate_id="entity-1", type_id="car", owner_id="u1", missing_info_attributes=["vin"],
            ))

        assert "[MISSING_INFO] Entity entity-1 created without: vin" in caplog.text

    def test_registering_twice_does_not_duplicate_handlers(self, caplog):
        """Test registering twice does not duplicate handlers."""
        register_event_handlers()
        register_event_handlers()

        with caplog.at_level(logging.INFO, logger="catalog.application.event_handlers"):
            event_publisher.publish(
                InfoRequested(aggregate_id="entity-1", requesting_user_id="u2", attribute_names=[])
            )

        assert caplog.text.count("[AUDIT] Info requested") == 1
