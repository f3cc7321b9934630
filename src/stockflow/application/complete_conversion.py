"""Application service: Complete Conversion use case."""

from __future__ import annotations

from decimal import Decimal

from stockflow.application.dto import ConversionDTO
from stockflow.domain.service.conversion_workflow import ConversionWorkflow


class CompleteConversionHandler:

    def __init__(self, workflow: ConversionWorkflow) -> None:
        self._workflow = workflow

    def handle(
        self,
        conversion_id: int,
        actual_output: str | int | float | Decimal,
        variance_reasons: list[str] | None = None,
        notes: str | None = None,
    ) -> ConversionDTO:
        """Record the measured output of a conversion.

        A large variance does not fail the call; the returned DTO has
        ``flagged`` set instead.
        """
        record = self._workflow.complete(
            conversion_id,
            actual_output,
            variance_reasons=variance_reasons or [],
            notes=notes,
        )
        return ConversionDTO.from_record(record)
