"""InventoryRecord — tracks stock and reservations per product and location.

Each (product, location) pair has at most one InventoryRecord that knows the
quantity on hand and how much of it is reserved by other processes.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from stockflow.domain.exceptions import InsufficientStock, ValidationError
from stockflow.domain.model.value_objects import ZERO


@dataclass
class InventoryRecord:
    """Aggregate root for per-location inventory.

    Invariants:
    - ``quantity`` is never driven below zero by a deduction
    - ``available_quantity`` is always >= 0, even if stale data has
      ``reserved_quantity`` above ``quantity``
    """

    product_id: int
    location_id: int
    quantity: Decimal = ZERO
    reserved_quantity: Decimal = ZERO

    @property
    def key(self) -> tuple[int, int]:
        return (self.product_id, self.location_id)

    @property
    def available_quantity(self) -> Decimal:
        return max(self.quantity - self.reserved_quantity, ZERO)

    def deduct(self, amount: Decimal) -> None:
        """Remove stock consumed by a conversion.

        Raises InsufficientStock if less than *amount* is available.
        """
        if amount <= ZERO:
            raise ValidationError("Deduction quantity must be positive")
        if amount > self.available_quantity:
            raise InsufficientStock(
                f"Insufficient stock for product {self.product_id} at location "
                f"{self.location_id} (need {amount}, have "
                f"{self.available_quantity} available)"
            )
        self.quantity -= amount

    def credit(self, amount: Decimal) -> None:
        """Add stock produced by a conversion or returned by a cancellation."""
        if amount < ZERO:
            raise ValidationError("Credit quantity cannot be negative")
        self.quantity += amount
