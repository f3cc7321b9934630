"""Application service: Check Inventory Status use case (query)."""

from __future__ import annotations

from stockflow.domain.service.provisioning_service import (
    ProvisioningService,
    StatusResult,
)


class CheckInventoryStatusHandler:

    def __init__(self, service: ProvisioningService) -> None:
        self._service = service

    def handle(self, product_id: int) -> StatusResult:
        return self._service.check_status(product_id)
