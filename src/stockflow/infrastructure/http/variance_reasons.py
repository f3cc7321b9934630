"""HTTP implementation of VarianceReasonRepository."""

from __future__ import annotations

from stockflow.domain.exceptions import MalformedResponse, ValidationError
from stockflow.domain.model.value_objects import ZERO, to_decimal
from stockflow.domain.model.variance import ImpactType, VarianceReason
from stockflow.domain.repository.variance_reason_repository import (
    VarianceReasonRepository,
)
from stockflow.infrastructure.http.client import UpstreamClient


class HttpVarianceReasonRepository(VarianceReasonRepository):

    def __init__(self, client: UpstreamClient) -> None:
        self._client = client

    def list_active(self) -> list[VarianceReason]:
        payload = self._client.get("/variance-reasons")
        if isinstance(payload, dict):
            payload = payload.get("reasons", [])
        if not isinstance(payload, list):
            raise MalformedResponse("Expected a list of variance reasons")
        reasons = [self._to_domain(raw) for raw in payload]
        return [reason for reason in reasons if reason.is_active]

    @staticmethod
    def _to_domain(raw: dict) -> VarianceReason:
        try:
            return VarianceReason(
                code=str(raw["code"]),
                name=raw.get("name") or str(raw["code"]),
                category=raw.get("category") or "general",
                description=raw.get("description") or "",
                impact_type=ImpactType(raw.get("impact_type") or "neutral"),
                typical_variance=to_decimal(raw.get("typical_variance") or ZERO, "typical variance"),
                is_active=raw.get("is_active", True) in (True, 1, "1"),
            )
        except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
            raise MalformedResponse(f"Unreadable variance reason: {raw!r}") from exc
