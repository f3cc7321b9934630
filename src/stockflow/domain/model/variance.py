"""Variance reasons and per-product conversion statistics."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from stockflow.domain.model.conversion import ConversionRecord, ConversionStatus
from stockflow.domain.model.value_objects import ZERO


class ImpactType(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class VarianceReason:
    """A catalogued explanation an operator can attach to a yield deviation."""

    code: str
    name: str
    category: str = "general"
    description: str = ""
    impact_type: ImpactType = ImpactType.NEUTRAL
    typical_variance: Decimal = ZERO
    is_active: bool = True


@dataclass(frozen=True)
class ConversionStats:
    total_conversions: int
    average_variance: Decimal
    total_input: Decimal
    total_output: Decimal
    efficiency_rate: Decimal

    @staticmethod
    def from_history(history: list[ConversionRecord]) -> ConversionStats:
        """Aggregate a product's conversion history.

        ``total_conversions`` counts every record; the other figures only
        use completed ones. Efficiency is output per unit of input, as a
        percentage, and defaults to 100 when nothing was converted.
        """
        completed = [c for c in history if c.status == ConversionStatus.COMPLETED]

        total_input = sum((c.input_quantity for c in completed), ZERO)
        total_output = sum((c.actual_output or ZERO for c in completed), ZERO)
        variance_sum = sum((c.variance_percentage or ZERO for c in completed), ZERO)

        average = variance_sum / len(completed) if completed else ZERO
        efficiency = (
            total_output / total_input * 100 if total_input > ZERO else Decimal("100")
        )

        return ConversionStats(
            total_conversions=len(history),
            average_variance=average,
            total_input=total_input,
            total_output=total_output,
            efficiency_rate=efficiency,
        )
