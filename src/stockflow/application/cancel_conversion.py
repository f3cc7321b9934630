"""Application service: Cancel Conversion use case.

Gives the deducted input stock back. Only conversions still waiting for
their yield can be cancelled; cancelling twice is harmless.
"""

from __future__ import annotations

from stockflow.domain.service.conversion_workflow import ConversionWorkflow


class CancelConversionHandler:

    def __init__(self, workflow: ConversionWorkflow) -> None:
        self._workflow = workflow

    def handle(self, conversion_id: int, reason: str | None = None) -> None:
        self._workflow.cancel(conversion_id, reason)
