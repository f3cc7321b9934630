"""Unit tests for the RecipeService domain service."""

from decimal import Decimal

import pytest

from stockflow.domain.exceptions import RecipeNotFound, ValidationError
from stockflow.domain.model.recipe import Recipe, RecipeStatus
from stockflow.domain.service.recipe_service import RecipeService
from tests.fakes import FakeRecipeCatalog


def _service():
    catalog = FakeRecipeCatalog([Recipe.create(1, "Flower to Pre-roll", "0.5")])
    return RecipeService(catalog), catalog


class TestCreate:

    def test_assigns_next_id(self):
        service, catalog = _service()

        recipe = service.create("Trim to Kief", "0.1", input_category_ids={11})

        assert recipe.id == 2
        assert catalog.get(2).input_category_ids == frozenset({11})

    def test_validates_before_saving(self):
        service, catalog = _service()

        with pytest.raises(ValidationError):
            service.create("Broken", "0")
        assert [r.id for r in catalog.list_active()] == [1]


class TestUpdate:

    def test_changes_only_given_fields(self):
        service, catalog = _service()

        recipe = service.update(1, acceptable_variance="0", track_variance=True)

        assert recipe.acceptable_variance == Decimal("0")
        assert recipe.track_variance is True
        assert catalog.get(1).base_ratio == Decimal("0.5")

    def test_invalid_change_leaves_recipe_alone(self):
        service, catalog = _service()

        with pytest.raises(ValidationError):
            service.update(1, expected_yield_ratio="3")
        assert catalog.get(1).expected_yield_ratio is None

    def test_unknown_recipe(self):
        service, _ = _service()
        with pytest.raises(RecipeNotFound):
            service.update(9, name="Nope")


class TestDeactivate:

    def test_marks_inactive(self):
        service, catalog = _service()

        service.deactivate(1)

        assert catalog.get(1).status == RecipeStatus.INACTIVE
        assert catalog.list_active() == []

    def test_twice_is_harmless(self):
        service, _ = _service()
        service.deactivate(1)
        assert service.deactivate(1).is_active is False

    def test_unknown_recipe(self):
        service, _ = _service()
        with pytest.raises(RecipeNotFound):
            service.deactivate(9)
