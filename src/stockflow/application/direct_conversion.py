"""Application service: Direct Conversion use case.

Moves stock from one product to another at a location using quantities the
operator supplies, without a recipe.
"""

from __future__ import annotations

from decimal import Decimal

from stockflow.application.dto import ConversionDTO
from stockflow.domain.service.conversion_workflow import ConversionWorkflow


class DirectConversionHandler:

    def __init__(self, workflow: ConversionWorkflow) -> None:
        self._workflow = workflow

    def handle(
        self,
        from_product_id: int,
        to_product_id: int | None,
        location_id: int,
        from_quantity: str | int | float | Decimal,
        to_quantity: str | int | float | Decimal | None,
        notes: str = "",
    ) -> ConversionDTO:
        record = self._workflow.convert_direct(
            from_product_id,
            to_product_id,
            location_id,
            from_quantity,
            to_quantity,
            notes=notes,
        )
        return ConversionDTO.from_record(record)
