"""Application service: Available Recipes use case (query)."""

from __future__ import annotations

from stockflow.application.dto import RecipeDTO
from stockflow.domain.service.conversion_workflow import ConversionWorkflow


class AvailableRecipesHandler:

    def __init__(self, workflow: ConversionWorkflow) -> None:
        self._workflow = workflow

    def handle(self, category_ids: list[int] | None = None) -> list[RecipeDTO]:
        """Recipes usable for products in *category_ids*, or all active ones."""
        if category_ids:
            recipes = self._workflow.available_recipes(category_ids)
        else:
            recipes = self._workflow.active_recipes()
        return [RecipeDTO.from_recipe(recipe) for recipe in recipes]
