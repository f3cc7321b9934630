"""JSON-file-backed implementation of ConversionRepository."""

from __future__ import annotations

import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from stockflow.domain.model.conversion import (
    ConversionMode,
    ConversionRecord,
    ConversionStatus,
)
from stockflow.domain.repository.conversion_repository import ConversionRepository
from stockflow.infrastructure.persistence.json_file import JsonListFile


class JsonConversionRepository(ConversionRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonListFile(file_path)
        self._lock = threading.Lock()

    # --- ConversionRepository interface ---------------------------------------

    def get_by_id(self, conversion_id: int) -> ConversionRecord | None:
        with self._lock:
            for raw in self._file.read():
                if raw["id"] == conversion_id:
                    return self._to_domain(raw)
        return None

    def list_for_product(self, product_id: int) -> list[ConversionRecord]:
        with self._lock:
            return [
                self._to_domain(raw)
                for raw in self._file.read()
                if product_id in (raw["input_product_id"], raw.get("output_product_id"))
            ]

    def save(self, record: ConversionRecord) -> None:
        with self._lock:
            records = self._file.read()

            if record.id is None:
                record.id = self._next_id(records)

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(records):
                if raw["id"] == record.id:
                    records[i] = self._to_raw(record)
                    break
            else:
                records.append(self._to_raw(record))

            self._file.write(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _next_id(records: list[dict]) -> int:
        if not records:
            return 1
        return max(r["id"] for r in records) + 1

    @staticmethod
    def _to_raw(record: ConversionRecord) -> dict:
        return {
            "id": record.id,
            "recipe_id": record.recipe_id,
            "input_product_id": record.input_product_id,
            "output_product_id": record.output_product_id,
            "location_id": record.location_id,
            "input_quantity": str(record.input_quantity),
            "expected_output": str(record.expected_output),
            "actual_output": _optional_str(record.actual_output),
            "variance_percentage": _optional_str(record.variance_percentage),
            "variance_reasons": list(record.variance_reasons),
            "status": record.status.value,
            "mode": record.mode.value,
            "notes": record.notes,
            "cancel_reason": record.cancel_reason,
            "flagged": record.flagged,
            "warnings": list(record.warnings),
            "created_at": record.created_at.isoformat(),
            "completed_at": record.completed_at.isoformat() if record.completed_at else None,
        }

    @staticmethod
    def _to_domain(raw: dict) -> ConversionRecord:
        return ConversionRecord(
            id=raw["id"],
            recipe_id=raw.get("recipe_id"),
            input_product_id=raw["input_product_id"],
            output_product_id=raw.get("output_product_id"),
            location_id=raw["location_id"],
            input_quantity=Decimal(raw["input_quantity"]),
            expected_output=Decimal(raw["expected_output"]),
            actual_output=_optional_decimal(raw.get("actual_output")),
            variance_percentage=_optional_decimal(raw.get("variance_percentage")),
            variance_reasons=list(raw.get("variance_reasons", [])),
            status=ConversionStatus(raw["status"]),
            mode=ConversionMode(raw.get("mode", "recipe")),
            notes=raw.get("notes", ""),
            cancel_reason=raw.get("cancel_reason"),
            flagged=raw.get("flagged", False),
            warnings=list(raw.get("warnings", [])),
            created_at=datetime.fromisoformat(raw["created_at"]),
            completed_at=(
                datetime.fromisoformat(raw["completed_at"]) if raw.get("completed_at") else None
            ),
        )


def _optional_str(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def _optional_decimal(raw: str | None) -> Decimal | None:
    return Decimal(raw) if raw is not None else None
