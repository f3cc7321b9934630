"""Serializable response envelope for callers such as HTTP handlers.

Every use case can be wrapped with ``respond`` to get an ``ApiResponse``
whose status code follows the usual HTTP conventions: 400 for bad input,
404 for unknown recipes or conversions, 409 for illegal state changes and
500 for upstream failures.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from stockflow.domain.exceptions import (
    ConversionRejected,
    DomainException,
    EntityNotFoundError,
    InvalidStateTransition,
    ValidationError,
)

logger = logging.getLogger(__name__)

OK = 200
CREATED = 201
BAD_REQUEST = 400
NOT_FOUND = 404
CONFLICT = 409
SERVER_ERROR = 500


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def status_for(exc: DomainException) -> int:
    if isinstance(exc, ValidationError):
        return BAD_REQUEST
    if isinstance(exc, EntityNotFoundError):
        return NOT_FOUND
    if isinstance(exc, InvalidStateTransition):
        return CONFLICT
    return SERVER_ERROR


def error_response(exc: DomainException) -> ApiResponse:
    status = status_for(exc)
    body: dict[str, Any] = {"success": False, "error": str(exc)}
    if isinstance(exc, ConversionRejected):
        body["errors"] = exc.errors
    if status == SERVER_ERROR:
        logger.error("%s: %s", type(exc).__name__, exc)
    return ApiResponse(status, body)


def respond(operation: Callable[[], Any], status: int = OK) -> ApiResponse:
    """Run *operation* and wrap its result, or its domain error, in a response.

    A result that reports ``success=False`` (a provisioning run that wrote
    nothing) is a server-side failure even though nothing was raised.
    """
    try:
        result = operation()
    except DomainException as exc:
        return error_response(exc)

    data = to_body(result)
    if isinstance(data, dict) and data.get("success") is False:
        return ApiResponse(SERVER_ERROR, data)
    if isinstance(data, dict):
        return ApiResponse(status, {"success": True, **data})
    return ApiResponse(status, {"success": True, "data": data})


def to_body(result: Any) -> Any:
    if dataclasses.is_dataclass(result) and not isinstance(result, type):
        return dataclasses.asdict(result)
    if isinstance(result, list):
        return [to_body(item) for item in result]
    return result
