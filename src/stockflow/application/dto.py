"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the application layer and its callers (CLI, HTTP
handlers) without exposing domain internals. Decimals are rendered as
strings so nothing is lost on the way to JSON.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from stockflow.domain.model.conversion import ConversionRecord
from stockflow.domain.model.recipe import Recipe
from stockflow.domain.model.variance import ConversionStats


def _fmt(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True)
class ConversionDTO:
    """Output: one conversion as shown to the user."""

    id: int
    recipe_id: int | None
    mode: str
    status: str
    input_product_id: int
    output_product_id: int | None
    location_id: int
    input_quantity: str
    expected_output: str
    actual_output: str | None
    variance_percentage: str | None
    variance_reasons: list[str]
    flagged: bool
    warnings: list[str]
    notes: str
    cancel_reason: str | None
    created_at: str
    completed_at: str | None

    @staticmethod
    def from_record(record: ConversionRecord) -> ConversionDTO:
        return ConversionDTO(
            id=record.id,  # type: ignore[arg-type]
            recipe_id=record.recipe_id,
            mode=record.mode.value,
            status=record.status.value,
            input_product_id=record.input_product_id,
            output_product_id=record.output_product_id,
            location_id=record.location_id,
            input_quantity=str(record.input_quantity),
            expected_output=str(record.expected_output),
            actual_output=_fmt(record.actual_output),
            variance_percentage=_fmt(record.variance_percentage),
            variance_reasons=list(record.variance_reasons),
            flagged=record.flagged,
            warnings=list(record.warnings),
            notes=record.notes,
            cancel_reason=record.cancel_reason,
            created_at=record.created_at.strftime("%Y-%m-%d %H:%M UTC"),
            completed_at=(
                record.completed_at.strftime("%Y-%m-%d %H:%M UTC")
                if record.completed_at
                else None
            ),
        )


@dataclass(frozen=True)
class ConversionStatsDTO:
    product_id: int
    total_conversions: int
    average_variance: str
    total_input: str
    total_output: str
    efficiency_rate: str

    @staticmethod
    def from_stats(product_id: int, stats: ConversionStats) -> ConversionStatsDTO:
        return ConversionStatsDTO(
            product_id=product_id,
            total_conversions=stats.total_conversions,
            average_variance=f"{stats.average_variance:.2f}",
            total_input=str(stats.total_input),
            total_output=str(stats.total_output),
            efficiency_rate=f"{stats.efficiency_rate:.2f}",
        )


@dataclass(frozen=True)
class RecipeDTO:
    id: int
    name: str
    conversion_type: str
    base_ratio: str
    ratio_unit: str
    input_category_ids: list[int]
    output_category_id: int | None
    acceptable_variance: str
    track_variance: bool
    status: str = "active"

    @staticmethod
    def from_recipe(recipe: Recipe) -> RecipeDTO:
        return RecipeDTO(
            id=recipe.id,
            name=recipe.name,
            conversion_type=recipe.conversion_type.value,
            base_ratio=str(recipe.base_ratio),
            ratio_unit=recipe.ratio_unit,
            input_category_ids=sorted(recipe.input_category_ids),
            output_category_id=recipe.output_category_id,
            acceptable_variance=str(recipe.acceptable_variance),
            track_variance=recipe.track_variance,
            status=recipe.status.value,
        )
