"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from stockflow.domain.exceptions import ValidationError

ZERO = Decimal("0")
ONE = Decimal("1")


def to_decimal(value: str | float | int | Decimal, label: str = "value") -> Decimal:
    """Coerce *value* to Decimal via ``str`` so floats keep their shortest repr."""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {label}: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid {label}: {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"Invalid {label}: {value!r}")
    return result


@dataclass(frozen=True)
class Quantity:
    """A non-negative stock quantity.

    Stock is measured in whatever unit the product is sold in (grams,
    units, millilitres), so fractional amounts are legal.
    """

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Quantity must be a Decimal, got {type(self.value).__name__}"
            )
        if self.value < ZERO:
            raise ValidationError(f"Quantity cannot be negative, got {self.value}")

    @property
    def is_zero(self) -> bool:
        return self.value == ZERO

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Quantity:
        """Convenient factory that coerces to Decimal safely."""
        return Quantity(to_decimal(amount, "quantity"))

    @staticmethod
    def positive(amount: str | float | int | Decimal) -> Quantity:
        """Like ``of`` but also rejects zero."""
        qty = Quantity.of(amount)
        if qty.is_zero:
            raise ValidationError("Quantity must be positive")
        return qty


@dataclass(frozen=True)
class Ratio:
    """A fraction in the closed interval [0, 1] (yields, tolerances)."""

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Ratio must be a Decimal, got {type(self.value).__name__}"
            )
        if not ZERO <= self.value <= ONE:
            raise ValidationError(f"Ratio must be between 0 and 1, got {self.value}")

    def __str__(self) -> str:
        return f"{self.value * 100:.2f}%"

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Ratio:
        return Ratio(to_decimal(amount, "ratio"))
