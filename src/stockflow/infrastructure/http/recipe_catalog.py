"""HTTP implementation of RecipeCatalog.

The recipes API is loose about types: numbers arrive as strings, booleans
as ``"1"``/``1``/``true``, and ``input_category_ids`` either as a list or
as a JSON-encoded string. ``recipe_from_raw`` absorbs all of that; the
JSON-file catalog reuses it, along with ``recipe_to_raw`` for writes.
New recipes are POSTed to ``/recipes``; edits are PUT to ``/recipes/{id}``.
"""

from __future__ import annotations

import json
from dataclasses import replace
from decimal import Decimal

from stockflow.domain.exceptions import MalformedResponse, ValidationError
from stockflow.domain.model.recipe import (
    DEFAULT_ACCEPTABLE_VARIANCE,
    DEFAULT_RATIO_UNIT,
    ConversionType,
    Recipe,
    RecipeStatus,
)
from stockflow.domain.model.value_objects import to_decimal
from stockflow.domain.repository.recipe_catalog import RecipeCatalog
from stockflow.infrastructure.http.client import UpstreamClient


class HttpRecipeCatalog(RecipeCatalog):

    def __init__(self, client: UpstreamClient) -> None:
        self._client = client

    def get(self, recipe_id: int) -> Recipe | None:
        payload = self._client.get(f"/recipes/{recipe_id}", allow_missing=True)
        if payload is None:
            return None
        if not isinstance(payload, dict):
            raise MalformedResponse("Expected a recipe object")
        return recipe_from_raw(payload.get("recipe", payload))

    def list_active(self) -> list[Recipe]:
        # The backend ignores its own default; ask for active recipes explicitly.
        payload = self._client.get("/recipes", params={"status": "active"})
        if isinstance(payload, dict):
            payload = payload.get("recipes", [])
        if not isinstance(payload, list):
            raise MalformedResponse("Expected a list of recipes")
        return [r for r in (recipe_from_raw(raw) for raw in payload) if r.is_active]

    def save(self, recipe: Recipe) -> Recipe:
        body = _request_body(recipe)
        if recipe.id is None:
            payload = self._client.post("/recipes", body)
        else:
            payload = self._client.put(f"/recipes/{recipe.id}", body)
        if not isinstance(payload, dict):
            raise MalformedResponse("Expected the saved recipe in the response")
        if isinstance(payload.get("recipe"), dict):
            return recipe_from_raw(payload["recipe"])
        if "id" in payload:
            return recipe_from_raw(payload)
        if payload.get("recipe_id") is not None:
            return replace(recipe, id=int(payload["recipe_id"]))
        raise MalformedResponse("Expected the saved recipe in the response")


# --- Serialization ------------------------------------------------------------


def recipe_from_raw(raw: dict) -> Recipe:
    try:
        output_category_id = _value(raw, "output_category_id")
        return Recipe(
            id=int(raw["id"]),
            name=_value(raw, "name", ""),
            slug=_value(raw, "slug", ""),
            description=_value(raw, "description", ""),
            conversion_type=ConversionType(_value(raw, "conversion_type", "simple")),
            input_category_ids=_category_ids(raw.get("input_category_ids")),
            output_category_id=int(output_category_id) if output_category_id is not None else None,
            base_ratio=to_decimal(_value(raw, "base_ratio", "1.0"), "base ratio"),
            ratio_unit=_value(raw, "ratio_unit", DEFAULT_RATIO_UNIT),
            allow_override=_flag(raw.get("allow_override")),
            expected_yield_ratio=_optional_decimal(raw.get("expected_yield_ratio")),
            typical_yield_ratio=_optional_decimal(raw.get("typical_yield_ratio")),
            acceptable_variance=to_decimal(
                _value(raw, "acceptable_variance", DEFAULT_ACCEPTABLE_VARIANCE),
                "acceptable variance",
            ),
            track_variance=_flag(raw.get("track_variance")),
            status=RecipeStatus(_value(raw, "status", "active")),
        )
    except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
        raise MalformedResponse(f"Unreadable recipe: {raw!r}") from exc


def recipe_to_raw(recipe: Recipe) -> dict:
    """Encode *recipe* the way the recipes API and the JSON file store it."""
    return {
        "id": recipe.id,
        "name": recipe.name,
        "slug": recipe.slug,
        "description": recipe.description,
        "conversion_type": recipe.conversion_type.value,
        "input_category_ids": sorted(recipe.input_category_ids),
        "output_category_id": recipe.output_category_id,
        "base_ratio": str(recipe.base_ratio),
        "ratio_unit": recipe.ratio_unit,
        "allow_override": recipe.allow_override,
        "expected_yield_ratio": _optional_str(recipe.expected_yield_ratio),
        "typical_yield_ratio": _optional_str(recipe.typical_yield_ratio),
        "acceptable_variance": str(recipe.acceptable_variance),
        "track_variance": recipe.track_variance,
        "status": recipe.status.value,
    }


def _value(raw: dict, key: str, default: object = None) -> object:
    # Only absent, null and empty-string fields fall back; a numeric 0 is a value.
    value = raw.get(key)
    if value is None or value == "":
        return default
    return value


def _category_ids(raw: object) -> frozenset[int]:
    if isinstance(raw, str):
        raw = json.loads(raw) if raw else []
    if not raw:
        return frozenset()
    return frozenset(int(value) for value in raw)


def _flag(raw: object) -> bool:
    return raw is True or raw == 1 or raw == "1"


def _optional_decimal(raw: object) -> Decimal | None:
    if raw in (None, ""):
        return None
    return to_decimal(raw, "yield ratio")


def _optional_str(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def _request_body(recipe: Recipe) -> dict:
    # The API takes category ids as a JSON-encoded string and flags as 1/0.
    body = recipe_to_raw(recipe)
    del body["id"]
    body["input_category_ids"] = json.dumps(body["input_category_ids"])
    body["allow_override"] = int(recipe.allow_override)
    body["track_variance"] = int(recipe.track_variance)
    return body
