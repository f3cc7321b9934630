"""Abstract catalog of conversion recipes."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockflow.domain.model.recipe import Recipe


class RecipeCatalog(ABC):

    @abstractmethod
    def get(self, recipe_id: int) -> Recipe | None:
        """Return a recipe by its ID, or None if not found."""

    @abstractmethod
    def list_active(self) -> list[Recipe]:
        """Return every active recipe."""

    @abstractmethod
    def save(self, recipe: Recipe) -> Recipe:
        """Create or replace a recipe; returns it with its ID assigned."""
