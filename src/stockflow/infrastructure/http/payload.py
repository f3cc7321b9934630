"""Parsing of upstream response bodies.

The upstream WordPress API sometimes prints a PHP warning (an HTML
fragment) before the JSON body it meant to send. The JSON after the noise
is still valid and must be used.
"""

from __future__ import annotations

import json
from typing import Any

from stockflow.domain.exceptions import MalformedResponse

_OBJECT_START = '{"'
_PREVIEW_CHARS = 200


def parse_payload(text: str) -> Any:
    """Decode *text* as JSON, skipping any noise before the first object.

    Raises MalformedResponse when neither the whole body nor the part
    starting at the first ``{"`` is valid JSON.
    """
    try:
        return json.loads(text)
    except ValueError:
        pass

    start = text.find(_OBJECT_START)
    if start != -1:
        try:
            return json.loads(text[start:])
        except ValueError:
            pass

    raise MalformedResponse(f"Invalid response format from server: {preview(text)}")


def preview(text: str) -> str:
    text = text.strip()
    if len(text) <= _PREVIEW_CHARS:
        return text
    return text[:_PREVIEW_CHARS] + "..."
