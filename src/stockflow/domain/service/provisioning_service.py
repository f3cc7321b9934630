"""Domain service: Location Inventory Provisioning.

Makes sure a product has an inventory record at every active location.
Each location is written independently: one location failing never stops
the others, and the run counts as successful as long as one location was
written. Re-running after a partial failure is the expected way to fill
the gaps, and ``check_status`` tells the caller whether that is needed.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from decimal import Decimal

from stockflow.domain.events import EventPublisher, InventoryProvisioned, NullPublisher
from stockflow.domain.exceptions import (
    DomainException,
    NoActiveLocations,
    ValidationError,
)
from stockflow.domain.model.location import Location
from stockflow.domain.model.value_objects import Quantity
from stockflow.domain.repository.inventory_store import InventoryStore
from stockflow.domain.repository.location_directory import LocationDirectory

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class ProvisioningResult:
    success: bool
    message: str
    initialized_locations: list[int] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    total_locations: int = 0


@dataclass(frozen=True)
class StatusResult:
    has_inventory: bool
    missing_locations: list[int] = field(default_factory=list)
    total_locations: int = 0


@dataclass(frozen=True)
class _Attempt:
    location: Location
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ProvisioningService:

    def __init__(
        self,
        locations: LocationDirectory,
        inventory: InventoryStore,
        publisher: EventPublisher | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._locations = locations
        self._inventory = inventory
        self._publisher = publisher or NullPublisher()
        self._max_workers = max_workers

    def initialize(
        self,
        product_id: int,
        initial_quantity: str | int | float | Decimal = 0,
    ) -> ProvisioningResult:
        """Upsert an inventory record for *product_id* at every active location.

        Raises NoActiveLocations when there is nowhere to provision, and lets
        a failed directory lookup propagate. Per-location failures are
        collected into ``errors``.
        """
        if isinstance(product_id, bool) or not isinstance(product_id, int) or product_id <= 0:
            raise ValidationError(f"Product ID must be a positive integer, got {product_id!r}")
        quantity = Quantity.of(initial_quantity).value

        locations = self._locations.list_active()
        if not locations:
            raise NoActiveLocations("No active locations found")

        logger.info(
            "Initializing inventory for product %s at %d locations (quantity=%s)",
            product_id, len(locations), quantity,
        )
        attempts = self._fan_out(product_id, locations, quantity)

        initialized = [a.location.id for a in attempts if a.ok]
        errors = [a.error for a in attempts if not a.ok]
        for message in errors:
            logger.warning("Product %s: %s", product_id, message)

        success = bool(initialized)
        if success:
            message = (
                f"Successfully initialized inventory at "
                f"{len(initialized)}/{len(locations)} locations"
            )
            self._publisher.publish(
                InventoryProvisioned(
                    product_id=product_id,
                    initialized_locations=tuple(initialized),
                    failed_count=len(errors),
                )
            )
        else:
            message = "Failed to initialize inventory at any location"
        logger.info("Product %s: %s", product_id, message)

        return ProvisioningResult(
            success=success,
            message=message,
            initialized_locations=initialized,
            errors=errors,
            total_locations=len(locations),
        )

    def check_status(self, product_id: int) -> StatusResult:
        """Report which active locations lack a record for *product_id*.

        Read-only. If the location listing fails the answer is
        indeterminate and is reported as "no inventory, nothing known"
        rather than raised.
        """
        try:
            locations = self._locations.list_active()
        except DomainException as exc:
            logger.warning("Inventory status check for product %s failed: %s", product_id, exc)
            return StatusResult(has_inventory=False, missing_locations=[], total_locations=0)

        missing = [
            location.id
            for location in locations
            if self._inventory.get(product_id, location.id) is None
        ]
        return StatusResult(
            has_inventory=not missing,
            missing_locations=missing,
            total_locations=len(locations),
        )

    # --- Internal helpers -----------------------------------------------------

    def _fan_out(
        self,
        product_id: int,
        locations: list[Location],
        quantity: Decimal,
    ) -> list[_Attempt]:
        workers = min(self._max_workers, len(locations))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="provision") as pool:
            futures = [
                pool.submit(self._provision_one, product_id, location, quantity)
                for location in locations
            ]
            # Collect every outcome in directory order; never fail fast.
            return [future.result() for future in futures]

    def _provision_one(
        self,
        product_id: int,
        location: Location,
        quantity: Decimal,
    ) -> _Attempt:
        try:
            self._inventory.upsert(product_id, location.id, quantity)
        except DomainException as exc:
            return _Attempt(location, f"Failed to initialize at {location.name}: {exc}")
        except Exception as exc:
            logger.exception("Unexpected error initializing at %s", location.name)
            return _Attempt(location, f"Error initializing at {location.name}: {exc}")
        return _Attempt(location)
