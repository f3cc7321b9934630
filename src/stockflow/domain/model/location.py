"""Location — a store or warehouse that can hold stock.

Locations are owned by the location directory; this package only reads
them.
"""

from __future__ import annotations

from dataclasses import dataclass

_ACTIVE_FLAGS = {"1", "true", "yes"}


@dataclass(frozen=True)
class Location:
    id: int
    name: str
    slug: str = ""
    active: bool = True

    @staticmethod
    def parse_active_flag(raw: object) -> bool:
        """Interpret the directory's active flag.

        The upstream API sends ``1``, ``"1"`` or ``true`` for active
        locations; anything else counts as inactive.
        """
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, int):
            return raw == 1
        return str(raw).strip().lower() in _ACTIVE_FLAGS
