"""Abstract source of store locations.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (HTTP, JSON) live in the
infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockflow.domain.model.location import Location


class LocationDirectory(ABC):

    @abstractmethod
    def list_active(self) -> list[Location]:
        """Return every active location.

        Raises UpstreamUnavailable if the directory cannot be reached.
        """
