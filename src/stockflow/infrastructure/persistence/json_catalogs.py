"""JSON-file-backed catalogs: locations, recipes, variance reasons.

Used when no upstream API is configured. Locations and variance reasons
are edited by hand (or by the seeding step of a deployment) and only ever
read here. Recipes are also written by the recipe management commands.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from decimal import Decimal
from pathlib import Path

from stockflow.domain.model.location import Location
from stockflow.domain.model.recipe import Recipe
from stockflow.domain.model.variance import ImpactType, VarianceReason
from stockflow.domain.repository.location_directory import LocationDirectory
from stockflow.domain.repository.recipe_catalog import RecipeCatalog
from stockflow.domain.repository.variance_reason_repository import (
    VarianceReasonRepository,
)
from stockflow.infrastructure.http.recipe_catalog import recipe_from_raw, recipe_to_raw
from stockflow.infrastructure.persistence.json_file import JsonListFile


class JsonLocationDirectory(LocationDirectory):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonListFile(file_path, create=False)

    def list_active(self) -> list[Location]:
        locations = [
            Location(
                id=raw["id"],
                name=raw["name"],
                slug=raw.get("slug", ""),
                active=Location.parse_active_flag(raw.get("is_active", 1)),
            )
            for raw in self._file.read()
        ]
        return [location for location in locations if location.active]


class JsonRecipeCatalog(RecipeCatalog):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonListFile(file_path, create=False)
        self._lock = threading.Lock()

    def get(self, recipe_id: int) -> Recipe | None:
        for raw in self._file.read():
            if int(raw["id"]) == recipe_id:
                return recipe_from_raw(raw)
        return None

    def list_active(self) -> list[Recipe]:
        recipes = [recipe_from_raw(raw) for raw in self._file.read()]
        return [recipe for recipe in recipes if recipe.is_active]

    def save(self, recipe: Recipe) -> Recipe:
        with self._lock:
            rows = self._file.read()
            if recipe.id is None:
                recipe = replace(recipe, id=max((int(r["id"]) for r in rows), default=0) + 1)

            for i, raw in enumerate(rows):
                if int(raw["id"]) == recipe.id:
                    rows[i] = recipe_to_raw(recipe)
                    break
            else:
                rows.append(recipe_to_raw(recipe))

            self._file.path.parent.mkdir(parents=True, exist_ok=True)
            self._file.write(rows)
        return recipe


class JsonVarianceReasonRepository(VarianceReasonRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonListFile(file_path, create=False)

    def list_active(self) -> list[VarianceReason]:
        reasons = [
            VarianceReason(
                code=raw["code"],
                name=raw.get("name", raw["code"]),
                category=raw.get("category", "general"),
                description=raw.get("description", ""),
                impact_type=ImpactType(raw.get("impact_type", "neutral")),
                typical_variance=Decimal(str(raw.get("typical_variance", "0"))),
                is_active=raw.get("is_active", True),
            )
            for raw in self._file.read()
        ]
        return [reason for reason in reasons if reason.is_active]
