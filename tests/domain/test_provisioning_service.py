"""Unit tests for the ProvisioningService domain service."""

import threading
import time
from decimal import Decimal

import pytest

from stockflow.domain.events import InventoryProvisioned
from stockflow.domain.exceptions import (
    NoActiveLocations,
    UpstreamUnavailable,
    ValidationError,
)
from stockflow.domain.model.inventory import InventoryRecord
from stockflow.domain.model.location import Location
from stockflow.domain.service.provisioning_service import ProvisioningService
from tests.fakes import FakeInventoryStore, FakeLocationDirectory, RecordingPublisher


def _locations(*specs: tuple[int, str, bool]) -> FakeLocationDirectory:
    return FakeLocationDirectory(
        [Location(id=i, name=name, slug=name.lower(), active=active) for i, name, active in specs]
    )


def _service(directory, store, publisher=None, max_workers=4) -> ProvisioningService:
    return ProvisioningService(directory, store, publisher=publisher, max_workers=max_workers)


class TestInitialize:

    def test_creates_record_at_every_active_location(self):
        directory = _locations((1, "A", True), (2, "B", True))
        store = FakeInventoryStore()
        svc = _service(directory, store)

        result = svc.initialize(product_id=500, initial_quantity=0)

        assert result.success is True
        assert result.initialized_locations == [1, 2]
        assert result.errors == []
        assert result.message == "Successfully initialized inventory at 2/2 locations"
        assert store.get(500, 1).quantity == Decimal("0")
        assert store.get(500, 2).quantity == Decimal("0")

    def test_skips_inactive_locations(self):
        directory = _locations((1, "A", True), (2, "Closed", False), (3, "C", True))
        store = FakeInventoryStore()

        result = _service(directory, store).initialize(7)

        assert result.initialized_locations == [1, 3]
        assert result.total_locations == 2
        assert store.get(7, 2) is None

    def test_no_active_locations_fails_fast(self):
        directory = _locations((1, "Closed", False))
        store = FakeInventoryStore()

        with pytest.raises(NoActiveLocations):
            _service(directory, store).initialize(7)
        assert store.upsert_calls == []

    def test_directory_failure_propagates(self):
        directory = FakeLocationDirectory(fail=True)
        with pytest.raises(UpstreamUnavailable):
            _service(directory, FakeInventoryStore()).initialize(7)

    def test_one_failing_location_does_not_stop_others(self):
        directory = _locations((1, "A", True), (2, "B", True), (3, "C", True))
        store = FakeInventoryStore(failing_locations={2})

        result = _service(directory, store).initialize(42, "5")

        assert result.success is True
        assert result.initialized_locations == [1, 3]
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Failed to initialize at B:")
        assert result.message == "Successfully initialized inventory at 2/3 locations"
        assert len(store.upsert_calls) == 3

    def test_all_locations_failing_reports_failure(self):
        directory = _locations((1, "A", True), (2, "B", True))
        store = FakeInventoryStore(failing_locations={1, 2})

        result = _service(directory, store).initialize(42)

        assert result.success is False
        assert result.initialized_locations == []
        assert len(result.errors) == 2
        assert result.message == "Failed to initialize inventory at any location"

    def test_unexpected_error_is_isolated(self):
        class ExplodingStore(FakeInventoryStore):
            def upsert(self, product_id, location_id, quantity):
                if location_id == 1:
                    raise RuntimeError("socket closed")
                return super().upsert(product_id, location_id, quantity)

        directory = _locations((1, "A", True), (2, "B", True))
        result = _service(directory, ExplodingStore()).initialize(9)

        assert result.initialized_locations == [2]
        assert "socket closed" in result.errors[0]

    def test_idempotent(self):
        directory = _locations((1, "A", True), (2, "B", True))
        store = FakeInventoryStore()
        svc = _service(directory, store)

        svc.initialize(500, 3)
        svc.initialize(500, 3)

        records = store.all_records()
        assert len(records) == 2
        assert all(r.quantity == Decimal("3") for r in records)

    def test_rerun_with_new_quantity_overwrites(self):
        directory = _locations((1, "A", True))
        store = FakeInventoryStore([InventoryRecord(500, 1, Decimal("12"))])

        _service(directory, store).initialize(500, 4)

        assert store.get(500, 1).quantity == Decimal("4")

    def test_negative_quantity_rejected(self):
        directory = _locations((1, "A", True))
        with pytest.raises(ValidationError, match="cannot be negative"):
            _service(directory, FakeInventoryStore()).initialize(500, -1)

    @pytest.mark.parametrize("bad_id", [0, -3, True, "12"])
    def test_invalid_product_id_rejected(self, bad_id):
        directory = _locations((1, "A", True))
        with pytest.raises(ValidationError, match="positive integer"):
            _service(directory, FakeInventoryStore()).initialize(bad_id)

    def test_publishes_event_on_success(self):
        directory = _locations((1, "A", True), (2, "B", True))
        publisher = RecordingPublisher()

        _service(directory, FakeInventoryStore(failing_locations={2}), publisher).initialize(8)

        events = publisher.of_type(InventoryProvisioned)
        assert len(events) == 1
        assert events[0].product_id == 8
        assert events[0].initialized_locations == (1,)
        assert events[0].failed_count == 1

    def test_no_event_when_nothing_initialized(self):
        directory = _locations((1, "A", True))
        publisher = RecordingPublisher()

        _service(directory, FakeInventoryStore(failing_locations={1}), publisher).initialize(8)

        assert publisher.events == []

    def test_upserts_run_concurrently(self):
        """All four slow writes overlap instead of running one after another."""
        in_flight = 0
        peak = 0
        guard = threading.Lock()

        class SlowStore(FakeInventoryStore):
            def upsert(self, product_id, location_id, quantity):
                nonlocal in_flight, peak
                with guard:
                    in_flight += 1
                    peak = max(peak, in_flight)
                time.sleep(0.05)
                with guard:
                    in_flight -= 1
                return super().upsert(product_id, location_id, quantity)

        directory = _locations(*[(i, f"L{i}", True) for i in range(1, 5)])
        result = _service(directory, SlowStore(), max_workers=4).initialize(1)

        assert result.initialized_locations == [1, 2, 3, 4]
        assert peak > 1

    def test_zero_workers_rejected(self):
        with pytest.raises(ValueError):
            ProvisioningService(_locations(), FakeInventoryStore(), max_workers=0)


class TestCheckStatus:

    def test_all_present_after_initialize(self):
        directory = _locations((1, "A", True), (2, "B", True))
        svc = _service(directory, FakeInventoryStore())
        svc.initialize(500)

        status = svc.check_status(500)

        assert status.has_inventory is True
        assert status.missing_locations == []
        assert status.total_locations == 2

    def test_reports_missing_locations(self):
        directory = _locations((1, "A", True), (2, "B", True), (3, "C", True))
        store = FakeInventoryStore([InventoryRecord(500, 2, Decimal("0"))])

        status = _service(directory, store).check_status(500)

        assert status.has_inventory is False
        assert status.missing_locations == [1, 3]
        assert status.total_locations == 3

    def test_existence_not_value_is_checked(self):
        directory = _locations((1, "A", True))
        store = FakeInventoryStore([InventoryRecord(500, 1, Decimal("0"))])

        assert _service(directory, store).check_status(500).has_inventory is True

    def test_directory_failure_is_downgraded(self):
        status = _service(FakeLocationDirectory(fail=True), FakeInventoryStore()).check_status(500)

        assert status.has_inventory is False
        assert status.missing_locations == []
        assert status.total_locations == 0

    def test_check_never_writes(self):
        directory = _locations((1, "A", True))
        store = FakeInventoryStore()

        _service(directory, store).check_status(500)

        assert store.upsert_calls == []
