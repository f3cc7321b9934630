"""Domain service: Recipe Management.

Creates, revises and retires recipes. Every write goes through
``Recipe.create`` (directly or via ``Recipe.revise``), so a recipe saved
here always has a positive base ratio and in-range yield ratios, whatever
the catalog itself accepts. Retiring a recipe marks it inactive; past
conversions keep pointing at it.
"""

from __future__ import annotations

import logging

from stockflow.domain.exceptions import RecipeNotFound
from stockflow.domain.model.recipe import Recipe
from stockflow.domain.repository.recipe_catalog import RecipeCatalog

logger = logging.getLogger(__name__)


class RecipeService:

    def __init__(self, catalog: RecipeCatalog) -> None:
        self._catalog = catalog

    def create(self, name: str, base_ratio, **attributes) -> Recipe:
        recipe = self._catalog.save(Recipe.create(None, name, base_ratio, **attributes))
        logger.info("Recipe #%s '%s' created with ratio %s", recipe.id, recipe.name, recipe.base_ratio)
        return recipe

    def update(self, recipe_id: int, **changes) -> Recipe:
        """Apply *changes* to an existing recipe; unset fields keep their values."""
        recipe = self._catalog.save(self._require(recipe_id).revise(**changes))
        logger.info("Recipe #%s updated: %s", recipe.id, ", ".join(sorted(changes)) or "no changes")
        return recipe

    def deactivate(self, recipe_id: int) -> Recipe:
        recipe = self._require(recipe_id)
        if not recipe.is_active:
            return recipe
        recipe = self._catalog.save(recipe.deactivated())
        logger.info("Recipe #%s '%s' deactivated", recipe.id, recipe.name)
        return recipe

    def _require(self, recipe_id: int) -> Recipe:
        recipe = self._catalog.get(recipe_id)
        if recipe is None:
            raise RecipeNotFound(f"Recipe #{recipe_id} not found")
        return recipe
