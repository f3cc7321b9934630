"""Recipe aggregate — a named conversion ratio with yield expectations.

Recipes are immutable. Edits go through ``Recipe.revise``, which runs the
same checks as ``Recipe.create`` and returns a new recipe for the catalog
to store.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from enum import Enum

from stockflow.domain.exceptions import ValidationError
from stockflow.domain.model.value_objects import ZERO, Ratio, to_decimal

DEFAULT_ACCEPTABLE_VARIANCE = Decimal("0.05")
DEFAULT_RATIO_UNIT = "g:g"


class ConversionType(Enum):
    SIMPLE = "simple"
    COMPOUND = "compound"


class RecipeStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class Recipe:
    """A conversion definition.

    Use ``Recipe.create()`` for recipes built from user input: it enforces
    ``base_ratio > 0`` and keeps every yield/variance ratio inside [0, 1].
    The plain constructor is left unchecked so catalogs can reconstitute
    whatever the upstream system stored.
    """

    id: int | None
    name: str
    base_ratio: Decimal
    slug: str = ""
    description: str = ""
    conversion_type: ConversionType = ConversionType.SIMPLE
    input_category_ids: frozenset[int] = field(default_factory=frozenset)
    output_category_id: int | None = None
    ratio_unit: str = DEFAULT_RATIO_UNIT
    allow_override: bool = False
    expected_yield_ratio: Decimal | None = None
    typical_yield_ratio: Decimal | None = None
    acceptable_variance: Decimal = DEFAULT_ACCEPTABLE_VARIANCE
    track_variance: bool = False
    status: RecipeStatus = RecipeStatus.ACTIVE

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        id: int | None,
        name: str,
        base_ratio: str | float | int | Decimal,
        *,
        acceptable_variance: str | float | int | Decimal = DEFAULT_ACCEPTABLE_VARIANCE,
        expected_yield_ratio: str | float | int | Decimal | None = None,
        typical_yield_ratio: str | float | int | Decimal | None = None,
        **kwargs,
    ) -> Recipe:
        if not name or not name.strip():
            raise ValidationError("Recipe name is required")

        ratio = to_decimal(base_ratio, "base ratio")
        if ratio <= ZERO:
            raise ValidationError(f"Base ratio must be greater than zero, got {ratio}")
        if "input_category_ids" in kwargs:
            kwargs["input_category_ids"] = frozenset(kwargs["input_category_ids"] or ())

        return Recipe(
            id=id,
            name=name.strip(),
            base_ratio=ratio,
            acceptable_variance=Ratio.of(acceptable_variance).value,
            expected_yield_ratio=(
                Ratio.of(expected_yield_ratio).value
                if expected_yield_ratio is not None
                else None
            ),
            typical_yield_ratio=(
                Ratio.of(typical_yield_ratio).value
                if typical_yield_ratio is not None
                else None
            ),
            **kwargs,
        )

    def revise(self, **changes) -> Recipe:
        """Return a validated copy with *changes* applied; the id is kept."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ValidationError(f"Unknown recipe field(s): {', '.join(sorted(unknown))}")
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update(changes)
        values["id"] = self.id
        return Recipe.create(**values)

    def deactivated(self) -> Recipe:
        return replace(self, status=RecipeStatus.INACTIVE)

    # --- Queries --------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.status == RecipeStatus.ACTIVE

    def accepts_category(self, category_id: int) -> bool:
        return category_id in self.input_category_ids

    def expected_output_for(self, input_quantity: Decimal) -> Decimal:
        """Predicted output for *input_quantity*; exact Decimal product."""
        return input_quantity * self.base_ratio

    def exceeds_acceptable_variance(self, variance_percentage: Decimal) -> bool:
        """True when variance tracking is on and the deviation is out of band."""
        if not self.track_variance:
            return False
        return abs(variance_percentage / 100) > self.acceptable_variance
