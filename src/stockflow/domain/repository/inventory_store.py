"""Abstract store for InventoryRecord aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from stockflow.domain.model.inventory import InventoryRecord


class InventoryStore(ABC):

    @abstractmethod
    def get(self, product_id: int, location_id: int) -> InventoryRecord | None:
        """Return the record for a product at a location, or None."""

    @abstractmethod
    def upsert(self, product_id: int, location_id: int, quantity: Decimal) -> InventoryRecord:
        """Create the record or overwrite its quantity; return the stored record."""
