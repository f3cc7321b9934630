"""Application service: Recipe Management use cases (commands)."""

from __future__ import annotations

from stockflow.application.dto import RecipeDTO
from stockflow.domain.service.recipe_service import RecipeService


class CreateRecipeHandler:

    def __init__(self, service: RecipeService) -> None:
        self._service = service

    def handle(self, name: str, base_ratio, **attributes) -> RecipeDTO:
        return RecipeDTO.from_recipe(self._service.create(name, base_ratio, **attributes))


class UpdateRecipeHandler:

    def __init__(self, service: RecipeService) -> None:
        self._service = service

    def handle(self, recipe_id: int, **changes) -> RecipeDTO:
        """Only the keyword arguments given are changed."""
        return RecipeDTO.from_recipe(self._service.update(recipe_id, **changes))


class DeactivateRecipeHandler:

    def __init__(self, service: RecipeService) -> None:
        self._service = service

    def handle(self, recipe_id: int) -> RecipeDTO:
        return RecipeDTO.from_recipe(self._service.deactivate(recipe_id))
