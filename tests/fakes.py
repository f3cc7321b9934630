"""In-memory fakes for testing.

These implement the same abstract interfaces as the HTTP and JSON adapters
but keep everything in dicts. No network, no file I/O.
"""

from __future__ import annotations

import threading
import time
from dataclasses import replace
from decimal import Decimal

from stockflow.domain.events import DomainEvent, EventPublisher
from stockflow.domain.exceptions import UpstreamUnavailable
from stockflow.domain.model.conversion import ConversionRecord
from stockflow.domain.model.inventory import InventoryRecord
from stockflow.domain.model.location import Location
from stockflow.domain.model.recipe import Recipe
from stockflow.domain.model.variance import VarianceReason
from stockflow.domain.repository.conversion_repository import ConversionRepository
from stockflow.domain.repository.inventory_store import InventoryStore
from stockflow.domain.repository.location_directory import LocationDirectory
from stockflow.domain.repository.recipe_catalog import RecipeCatalog
from stockflow.domain.repository.variance_reason_repository import (
    VarianceReasonRepository,
)


class FakeLocationDirectory(LocationDirectory):

    def __init__(self, locations: list[Location] | None = None, fail: bool = False) -> None:
        self._locations = list(locations or [])
        self.fail = fail

    def list_active(self) -> list[Location]:
        if self.fail:
            raise UpstreamUnavailable("Failed to fetch locations: 503 Service Unavailable")
        return [loc for loc in self._locations if loc.active]


class FakeInventoryStore(InventoryStore):
    """Dict-backed store; ``failing_locations`` makes upserts there raise."""

    def __init__(
        self,
        records: list[InventoryRecord] | None = None,
        failing_locations: set[int] | None = None,
    ) -> None:
        self._store: dict[tuple[int, int], InventoryRecord] = {}
        self._lock = threading.Lock()
        self.failing_locations = set(failing_locations or ())
        self.upsert_calls: list[tuple[int, int, Decimal]] = []
        for record in records or []:
            self._store[record.key] = record

    def get(self, product_id: int, location_id: int) -> InventoryRecord | None:
        record = self._store.get((product_id, location_id))
        if record is None:
            return None
        # Hand out copies so callers must upsert to change stored state.
        return InventoryRecord(
            record.product_id, record.location_id, record.quantity, record.reserved_quantity
        )

    def upsert(self, product_id: int, location_id: int, quantity: Decimal) -> InventoryRecord:
        with self._lock:
            self.upsert_calls.append((product_id, location_id, quantity))
            if location_id in self.failing_locations:
                raise UpstreamUnavailable(f"HTTP 500: location {location_id} write failed")
            existing = self._store.get((product_id, location_id))
            reserved = existing.reserved_quantity if existing else Decimal("0")
            record = InventoryRecord(product_id, location_id, quantity, reserved)
            self._store[record.key] = record
            return record

    def quantity(self, product_id: int, location_id: int) -> Decimal:
        return self._store[(product_id, location_id)].quantity

    def all_records(self) -> list[InventoryRecord]:
        return list(self._store.values())


class FakeRecipeCatalog(RecipeCatalog):

    def __init__(self, recipes: list[Recipe] | None = None) -> None:
        self._store: dict[int, Recipe] = {r.id: r for r in recipes or []}

    def get(self, recipe_id: int) -> Recipe | None:
        return self._store.get(recipe_id)

    def list_active(self) -> list[Recipe]:
        return [r for r in self._store.values() if r.is_active]

    def save(self, recipe: Recipe) -> Recipe:
        if recipe.id is None:
            recipe = replace(recipe, id=max(self._store, default=0) + 1)
        self._store[recipe.id] = recipe
        return recipe


class FakeConversionRepository(ConversionRepository):

    def __init__(self) -> None:
        self._store: dict[int, ConversionRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self.fail_on_save = False
        # Widens the read-to-save window so racing callers overlap.
        self.read_delay = 0.0

    def get_by_id(self, conversion_id: int) -> ConversionRecord | None:
        record = self._store.get(conversion_id)
        if self.read_delay:
            time.sleep(self.read_delay)
        return record

    def list_for_product(self, product_id: int) -> list[ConversionRecord]:
        return [
            r for r in self._store.values()
            if product_id in (r.input_product_id, r.output_product_id)
        ]

    def save(self, record: ConversionRecord) -> None:
        if self.fail_on_save:
            raise OSError("disk full")
        with self._lock:
            if record.id is None:
                record.id = self._next_id
                self._next_id += 1
            self._store[record.id] = record


class FakeVarianceReasonRepository(VarianceReasonRepository):

    def __init__(self, reasons: list[VarianceReason] | None = None) -> None:
        self._reasons = list(reasons or [])

    def list_active(self) -> list[VarianceReason]:
        return [r for r in self._reasons if r.is_active]


class RecordingPublisher(EventPublisher):

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list[DomainEvent]:
        return [e for e in self.events if isinstance(e, event_type)]
