"""Abstract catalog of variance reasons."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockflow.domain.model.variance import VarianceReason


class VarianceReasonRepository(ABC):

    @abstractmethod
    def list_active(self) -> list[VarianceReason]:
        """Return the reasons operators may currently pick from."""
