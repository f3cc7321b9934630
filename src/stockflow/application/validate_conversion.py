"""Application service: Validate Conversion use case (query)."""

from __future__ import annotations

from decimal import Decimal

from stockflow.domain.service.conversion_workflow import (
    ConversionWorkflow,
    ValidationResult,
)


class ValidateConversionHandler:

    def __init__(self, workflow: ConversionWorkflow) -> None:
        self._workflow = workflow

    def handle(
        self,
        recipe_id: int,
        input_product_id: int,
        location_id: int,
        input_quantity: str | int | float | Decimal,
    ) -> ValidationResult:
        return self._workflow.validate(recipe_id, input_product_id, location_id, input_quantity)
