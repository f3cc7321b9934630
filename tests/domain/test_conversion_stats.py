"""Unit tests for per-product conversion statistics."""

from decimal import Decimal

from stockflow.domain.model.conversion import ConversionRecord, ConversionStatus
from stockflow.domain.model.variance import ConversionStats


def _completed(input_qty: str, output: str, variance: str) -> ConversionRecord:
    return ConversionRecord(
        id=None, recipe_id=1, input_product_id=100, location_id=1,
        input_quantity=Decimal(input_qty), expected_output=Decimal(input_qty),
        actual_output=Decimal(output), variance_percentage=Decimal(variance),
        status=ConversionStatus.COMPLETED,
    )


class TestConversionStats:

    def test_empty_history(self):
        stats = ConversionStats.from_history([])
        assert stats.total_conversions == 0
        assert stats.average_variance == 0
        assert stats.efficiency_rate == Decimal("100")

    def test_aggregates_completed_only(self):
        open_one = ConversionRecord(
            id=None, recipe_id=1, input_product_id=100, location_id=1,
            input_quantity=Decimal("50"), expected_output=Decimal("25"),
            status=ConversionStatus.YIELD_RECORDING,
        )
        history = [
            _completed("10", "9", "-10"),
            _completed("10", "11", "10"),
            open_one,
        ]

        stats = ConversionStats.from_history(history)

        assert stats.total_conversions == 3
        assert stats.total_input == Decimal("20")
        assert stats.total_output == Decimal("20")
        assert stats.average_variance == 0
        assert stats.efficiency_rate == Decimal("100")

    def test_efficiency_rate(self):
        stats = ConversionStats.from_history([_completed("10", "4", "0")])
        assert stats.efficiency_rate == Decimal("40")
