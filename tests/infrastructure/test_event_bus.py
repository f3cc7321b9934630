"""Tests for the in-process event bus."""

import logging
from decimal import Decimal

from stockflow.domain.events import (
    ConversionCancelled,
    ConversionCompleted,
    DomainEvent,
    InventoryProvisioned,
)
from stockflow.infrastructure.messaging.event_bus import InMemoryEventBus


def _completed() -> ConversionCompleted:
    return ConversionCompleted(
        conversion_id=1, actual_output=Decimal("4.5"),
        variance_percentage=Decimal("-10"), flagged=True,
    )


class TestInMemoryEventBus:

    def test_dispatches_by_type(self):
        bus = InMemoryEventBus()
        completed, cancelled = [], []
        bus.subscribe(ConversionCompleted, completed.append)
        bus.subscribe(ConversionCancelled, cancelled.append)

        bus.publish(_completed())

        assert len(completed) == 1
        assert cancelled == []

    def test_base_type_receives_everything(self):
        bus = InMemoryEventBus()
        seen: list[DomainEvent] = []
        bus.subscribe(DomainEvent, seen.append)

        bus.publish(_completed())
        bus.publish(InventoryProvisioned(product_id=5, initialized_locations=(1,), failed_count=0))

        assert [type(e) for e in seen] == [ConversionCompleted, InventoryProvisioned]
        assert all(e.occurred_at is not None for e in seen)

    def test_unsubscribe(self):
        bus = InMemoryEventBus()
        seen = []
        unsubscribe = bus.subscribe(ConversionCompleted, seen.append)

        unsubscribe()
        unsubscribe()
        bus.publish(_completed())

        assert seen == []

    def test_failing_subscriber_is_isolated(self, caplog):
        bus = InMemoryEventBus()
        seen = []

        def broken(event):
            raise RuntimeError("report server down")

        bus.subscribe(ConversionCompleted, broken)
        bus.subscribe(ConversionCompleted, seen.append)

        with caplog.at_level(logging.ERROR):
            bus.publish(_completed())

        assert len(seen) == 1
        assert "ConversionCompleted" in caplog.text
