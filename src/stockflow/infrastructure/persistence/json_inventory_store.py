"""JSON-file-backed implementation of InventoryStore."""

from __future__ import annotations

import threading
from decimal import Decimal
from pathlib import Path

from stockflow.domain.model.inventory import InventoryRecord
from stockflow.domain.repository.inventory_store import InventoryStore
from stockflow.infrastructure.persistence.json_file import JsonListFile


class JsonInventoryStore(InventoryStore):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonListFile(file_path)
        # Provisioning writes from a thread pool; serialize file access.
        self._lock = threading.Lock()

    # --- InventoryStore interface ---------------------------------------------

    def get(self, product_id: int, location_id: int) -> InventoryRecord | None:
        with self._lock:
            raw = _find(self._file.read(), product_id, location_id)
        return self._to_domain(raw) if raw is not None else None

    def upsert(self, product_id: int, location_id: int, quantity: Decimal) -> InventoryRecord:
        with self._lock:
            rows = self._file.read()
            raw = _find(rows, product_id, location_id)
            if raw is None:
                raw = self._to_raw(InventoryRecord(product_id, location_id))
                rows.append(raw)
            raw["quantity"] = str(quantity)
            self._file.write(rows)
        return self._to_domain(raw)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: InventoryRecord) -> dict:
        return {
            "product_id": record.product_id,
            "location_id": record.location_id,
            "quantity": str(record.quantity),
            "reserved_quantity": str(record.reserved_quantity),
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryRecord:
        return InventoryRecord(
            product_id=raw["product_id"],
            location_id=raw["location_id"],
            quantity=Decimal(raw["quantity"]),
            reserved_quantity=Decimal(raw.get("reserved_quantity", "0")),
        )


def _find(rows: list[dict], product_id: int, location_id: int) -> dict | None:
    return next(
        (r for r in rows if r["product_id"] == product_id and r["location_id"] == location_id),
        None,
    )
