"""ConversionRecord aggregate — one run of turning input stock into output.

The record is the audit trail of a conversion. It is created when stock is
deducted, advanced when the measured yield is recorded, and never deleted.
All state transitions are enforced here; the workflow service coordinates
the inventory side effects around them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from stockflow.domain.exceptions import InvalidStateTransition, ValidationError
from stockflow.domain.model.value_objects import ZERO


class ConversionStatus(Enum):
    PENDING = "pending"
    YIELD_RECORDING = "yield_recording"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ConversionMode(Enum):
    RECIPE = "recipe"
    DIRECT = "direct"


_ALLOWED_TRANSITIONS: dict[ConversionStatus, frozenset[ConversionStatus]] = {
    ConversionStatus.PENDING: frozenset(
        {ConversionStatus.YIELD_RECORDING, ConversionStatus.CANCELLED}
    ),
    ConversionStatus.YIELD_RECORDING: frozenset(
        {ConversionStatus.COMPLETED, ConversionStatus.CANCELLED}
    ),
    ConversionStatus.COMPLETED: frozenset(),
    ConversionStatus.CANCELLED: frozenset(),
}


def variance_percentage(expected: Decimal, actual: Decimal) -> Decimal:
    """Percentage deviation of *actual* from *expected*.

    Returns zero when nothing was expected; callers are responsible for
    flagging that case.
    """
    if expected == ZERO:
        return ZERO
    return (actual - expected) / expected * 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ConversionRecord:
    """Aggregate root for conversions.

    Use ``ConversionRecord.start()`` for new recipe conversions and
    ``ConversionRecord.direct()`` for recipe-less ones. ``__init__`` stays
    simple so repositories can reconstitute stored records without
    re-validating.
    """

    id: int | None
    recipe_id: int | None
    input_product_id: int
    location_id: int
    input_quantity: Decimal
    expected_output: Decimal
    output_product_id: int | None = None
    actual_output: Decimal | None = None
    variance_percentage: Decimal | None = None
    variance_reasons: list[str] = field(default_factory=list)
    status: ConversionStatus = ConversionStatus.PENDING
    mode: ConversionMode = ConversionMode.RECIPE
    notes: str = ""
    cancel_reason: str | None = None
    flagged: bool = False
    warnings: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def start(
        recipe_id: int,
        input_product_id: int,
        location_id: int,
        input_quantity: Decimal,
        expected_output: Decimal,
        output_product_id: int | None = None,
        notes: str = "",
    ) -> ConversionRecord:
        """Create a pending recipe conversion."""
        if input_quantity <= ZERO:
            raise ValidationError("Input quantity must be positive")
        return ConversionRecord(
            id=None,
            recipe_id=recipe_id,
            input_product_id=input_product_id,
            location_id=location_id,
            input_quantity=input_quantity,
            expected_output=expected_output,
            output_product_id=output_product_id,
            notes=notes or "",
        )

    @staticmethod
    def direct(
        input_product_id: int,
        output_product_id: int,
        location_id: int,
        input_quantity: Decimal,
        output_quantity: Decimal,
        notes: str = "",
    ) -> ConversionRecord:
        """Create an already-completed conversion with caller-supplied output.

        Direct conversions carry no recipe, so there is nothing to compare
        the output against and no variance is computed.
        """
        if input_quantity <= ZERO or output_quantity <= ZERO:
            raise ValidationError("Quantities must be positive numbers")
        now = _utcnow()
        return ConversionRecord(
            id=None,
            recipe_id=None,
            input_product_id=input_product_id,
            location_id=location_id,
            input_quantity=input_quantity,
            expected_output=output_quantity,
            output_product_id=output_product_id,
            actual_output=output_quantity,
            status=ConversionStatus.COMPLETED,
            mode=ConversionMode.DIRECT,
            notes=notes or "",
            created_at=now,
            completed_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def begin_yield_recording(self) -> None:
        """Transition PENDING -> YIELD_RECORDING (stock has been deducted)."""
        self._transition(ConversionStatus.YIELD_RECORDING)

    def record_yield(
        self,
        actual_output: Decimal,
        variance_reasons: list[str] | None = None,
        notes: str | None = None,
    ) -> None:
        """Transition YIELD_RECORDING -> COMPLETED with the measured output."""
        if actual_output < ZERO:
            raise ValidationError("Actual output cannot be negative")
        self._transition(ConversionStatus.COMPLETED)

        self.actual_output = actual_output
        self.variance_percentage = variance_percentage(self.expected_output, actual_output)
        if self.expected_output == ZERO:
            self.warnings.append(
                "Expected output is zero; variance reported as 0%"
            )
        self.variance_reasons = list(variance_reasons or [])
        if notes is not None:
            self.notes = notes
        self.completed_at = _utcnow()

    def cancel(self, reason: str | None = None) -> bool:
        """Transition PENDING|YIELD_RECORDING -> CANCELLED.

        Returns False when the record was already cancelled (no-op), True
        when this call cancelled it. Restoring deducted stock is the
        caller's job and must happen only when this returns True.
        """
        if self.status == ConversionStatus.CANCELLED:
            return False
        self._transition(ConversionStatus.CANCELLED)
        self.cancel_reason = reason
        return True

    # --- Internal helpers -----------------------------------------------------

    def _transition(self, target: ConversionStatus) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStateTransition(
                f"Cannot move conversion #{self.id} from "
                f"{self.status.value} to {target.value}"
            )
        self.status = target
