"""Application service: Start Conversion use case.

Deducts the input stock and returns the conversion, already waiting for
its yield to be recorded.
"""

from __future__ import annotations

from decimal import Decimal

from stockflow.application.dto import ConversionDTO
from stockflow.domain.service.conversion_workflow import ConversionWorkflow


class StartConversionHandler:

    def __init__(self, workflow: ConversionWorkflow) -> None:
        self._workflow = workflow

    def handle(
        self,
        recipe_id: int,
        input_product_id: int,
        location_id: int,
        input_quantity: str | int | float | Decimal,
        output_product_id: int | None = None,
        notes: str = "",
    ) -> ConversionDTO:
        record = self._workflow.initiate(
            recipe_id,
            input_product_id,
            location_id,
            input_quantity,
            output_product_id=output_product_id,
            notes=notes,
        )
        return ConversionDTO.from_record(record)
