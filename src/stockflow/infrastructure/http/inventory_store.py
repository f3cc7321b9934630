"""HTTP implementation of InventoryStore.

The upstream ``/inventory`` endpoint answers a filtered GET with a list of
matching rows and accepts a POST that creates or overwrites the row for a
(product, location) pair.
"""

from __future__ import annotations

from decimal import Decimal

from stockflow.domain.exceptions import MalformedResponse, ValidationError
from stockflow.domain.model.inventory import InventoryRecord
from stockflow.domain.model.value_objects import ZERO, to_decimal
from stockflow.domain.repository.inventory_store import InventoryStore
from stockflow.infrastructure.http.client import UpstreamClient


class HttpInventoryStore(InventoryStore):

    def __init__(self, client: UpstreamClient) -> None:
        self._client = client

    # --- InventoryStore interface ---------------------------------------------

    def get(self, product_id: int, location_id: int) -> InventoryRecord | None:
        payload = self._client.get(
            "/inventory",
            params={"product_id": product_id, "location_id": location_id},
            allow_missing=True,
        )
        if not payload:
            return None
        if not isinstance(payload, list):
            raise MalformedResponse("Expected a list of inventory rows")
        return self._to_domain(payload[0], product_id, location_id)

    def upsert(self, product_id: int, location_id: int, quantity: Decimal) -> InventoryRecord:
        payload = self._client.post(
            "/inventory",
            {
                "product_id": product_id,
                "location_id": location_id,
                # JSON has no decimal type; send the exact digits.
                "quantity": str(quantity),
            },
        )
        raw = payload.get("inventory") if isinstance(payload, dict) else None
        if isinstance(raw, dict):
            return self._to_domain(raw, product_id, location_id)
        return InventoryRecord(product_id=product_id, location_id=location_id, quantity=quantity)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(raw: dict, product_id: int, location_id: int) -> InventoryRecord:
        try:
            return InventoryRecord(
                product_id=int(raw.get("product_id", product_id)),
                location_id=int(raw.get("location_id", location_id)),
                quantity=to_decimal(raw.get("quantity") or 0, "quantity"),
                reserved_quantity=to_decimal(raw.get("reserved_quantity") or ZERO, "reserved quantity"),
            )
        except (AttributeError, TypeError, ValueError, ValidationError) as exc:
            raise MalformedResponse(f"Unreadable inventory row: {raw!r}") from exc
