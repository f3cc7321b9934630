"""Application service: Initialize Inventory use case.

Used when a product is onboarded: gives it a stock record at every active
location.
"""

from __future__ import annotations

from decimal import Decimal

from stockflow.domain.service.provisioning_service import (
    ProvisioningResult,
    ProvisioningService,
)


class InitializeInventoryHandler:

    def __init__(self, service: ProvisioningService) -> None:
        self._service = service

    def handle(
        self,
        product_id: int,
        initial_quantity: str | int | float | Decimal = 0,
    ) -> ProvisioningResult:
        return self._service.initialize(product_id, initial_quantity)
