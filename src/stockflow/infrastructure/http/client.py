"""Thin httpx wrapper shared by every upstream adapter.

Authenticates with consumer key/secret query parameters, applies the
configured timeout to every call, and turns transport errors, non-2xx
statuses and ``{"success": false}`` envelopes into UpstreamUnavailable.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from stockflow.domain.exceptions import UpstreamUnavailable
from stockflow.infrastructure.http.payload import parse_payload, preview

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class UpstreamClient:

    def __init__(
        self,
        base_url: str,
        consumer_key: str = "",
        consumer_secret: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        params = {}
        if consumer_key and consumer_secret:
            params = {"consumer_key": consumer_key, "consumer_secret": consumer_secret}
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            params=params,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> UpstreamClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- Requests -------------------------------------------------------------

    def get(self, path: str, params: dict | None = None, *, allow_missing: bool = False) -> Any:
        """GET *path*; with ``allow_missing`` a 404 yields None instead of raising."""
        return self._request("GET", path, params=params, allow_missing=allow_missing)

    def post(self, path: str, body: dict) -> Any:
        return self._request("POST", path, json=body)

    def put(self, path: str, body: dict) -> Any:
        return self._request("PUT", path, json=body)

    # --- Internal helpers -----------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        allow_missing: bool = False,
        **kwargs: Any,
    ) -> Any:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailable(f"{method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"{method} {path} failed: {exc}") from exc

        if allow_missing and response.status_code == 404:
            return None
        if response.is_error:
            logger.debug("%s %s -> %s: %s", method, path, response.status_code, response.text)
            raise UpstreamUnavailable(
                f"HTTP {response.status_code}: {preview(response.text)}"
            )

        payload = parse_payload(response.text)
        if isinstance(payload, dict) and payload.get("success") is False:
            raise UpstreamUnavailable(
                payload.get("message") or "API returned success: false"
            )
        return payload
