"""Domain events and the publisher port.

Services announce state changes by publishing one of these events.
Reporting or UI code subscribes through the infrastructure event bus
instead of being called directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    occurred_at: datetime = field(default_factory=_utcnow, kw_only=True)


@dataclass(frozen=True)
class InventoryProvisioned(DomainEvent):
    product_id: int
    initialized_locations: tuple[int, ...]
    failed_count: int


@dataclass(frozen=True)
class ConversionInitiated(DomainEvent):
    conversion_id: int
    input_product_id: int
    location_id: int
    input_quantity: Decimal
    expected_output: Decimal


@dataclass(frozen=True)
class ConversionCompleted(DomainEvent):
    conversion_id: int
    actual_output: Decimal
    variance_percentage: Decimal | None
    flagged: bool


@dataclass(frozen=True)
class ConversionCancelled(DomainEvent):
    conversion_id: int
    reason: str | None


class EventPublisher(ABC):

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Deliver *event* to every interested subscriber."""


class NullPublisher(EventPublisher):
    """Publisher that drops every event; the default when nobody listens."""

    def publish(self, event: DomainEvent) -> None:
        return None
