"""Abstract repository for ConversionRecord aggregates."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockflow.domain.model.conversion import ConversionRecord


class ConversionRepository(ABC):

    @abstractmethod
    def get_by_id(self, conversion_id: int) -> ConversionRecord | None:
        """Return a conversion by its ID, or None if not found."""

    @abstractmethod
    def list_for_product(self, product_id: int) -> list[ConversionRecord]:
        """Return conversions where the product is the input or the output."""

    @abstractmethod
    def save(self, record: ConversionRecord) -> None:
        """Persist a new or updated conversion, assigning an ID if needed."""
