"""Unit tests for the InventoryRecord aggregate."""

from decimal import Decimal

import pytest

from stockflow.domain.exceptions import InsufficientStock, ValidationError
from stockflow.domain.model.inventory import InventoryRecord


def _record(quantity: str, reserved: str = "0") -> InventoryRecord:
    return InventoryRecord(
        product_id=1, location_id=10,
        quantity=Decimal(quantity), reserved_quantity=Decimal(reserved),
    )


class TestAvailableQuantity:

    def test_available_is_quantity_minus_reserved(self):
        assert _record("100", "25").available_quantity == Decimal("75")

    def test_available_clamped_at_zero(self):
        assert _record("5", "8").available_quantity == Decimal("0")


class TestDeduct:

    def test_deduct_reduces_quantity(self):
        inv = _record("10")
        inv.deduct(Decimal("3.5"))
        assert inv.quantity == Decimal("6.5")

    def test_deduct_all_available(self):
        inv = _record("10", "4")
        inv.deduct(Decimal("6"))
        assert inv.quantity == Decimal("4")
        assert inv.available_quantity == Decimal("0")

    def test_deduct_more_than_available_rejected(self):
        inv = _record("10", "4")
        with pytest.raises(InsufficientStock, match="need 7, have 6 available"):
            inv.deduct(Decimal("7"))
        assert inv.quantity == Decimal("10")

    def test_deduct_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _record("10").deduct(Decimal("0"))


class TestCredit:

    def test_credit_increases_quantity(self):
        inv = _record("1")
        inv.credit(Decimal("2.25"))
        assert inv.quantity == Decimal("3.25")

    def test_credit_zero_is_allowed(self):
        inv = _record("1")
        inv.credit(Decimal("0"))
        assert inv.quantity == Decimal("1")

    def test_credit_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _record("1").credit(Decimal("-1"))
