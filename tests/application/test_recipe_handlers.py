"""Integration tests for the recipe management use cases."""

from stockflow.application.manage_recipes import (
    CreateRecipeHandler,
    DeactivateRecipeHandler,
    UpdateRecipeHandler,
)
from stockflow.application.responses import BAD_REQUEST, CREATED, NOT_FOUND, respond
from stockflow.domain.model.recipe import ConversionType, Recipe
from stockflow.domain.service.recipe_service import RecipeService
from tests.fakes import FakeRecipeCatalog


def _service() -> RecipeService:
    return RecipeService(FakeRecipeCatalog([Recipe.create(1, "Flower to Pre-roll", "0.5")]))


class TestRecipeHandlers:

    def test_create_returns_dto(self):
        dto = CreateRecipeHandler(_service()).handle(
            "Trim to Extract", "0.15",
            conversion_type=ConversionType.COMPOUND,
            input_category_ids={11},
        )

        assert dto.id == 2
        assert dto.conversion_type == "compound"
        assert dto.base_ratio == "0.15"
        assert dto.input_category_ids == [11]
        assert dto.status == "active"

    def test_update_and_deactivate(self):
        service = _service()

        updated = UpdateRecipeHandler(service).handle(1, name="Flower to Joint")
        retired = DeactivateRecipeHandler(service).handle(1)

        assert updated.name == "Flower to Joint"
        assert retired.status == "inactive"

    def test_create_through_envelope(self):
        handler = CreateRecipeHandler(_service())

        response = respond(lambda: handler.handle("Kief", "0.1"), status=CREATED)

        assert response.status_code == CREATED
        assert response.body["id"] == 2

    def test_error_statuses(self):
        service = _service()

        missing = respond(lambda: UpdateRecipeHandler(service).handle(9, name="x"))
        invalid = respond(lambda: CreateRecipeHandler(service).handle("Bad", "-1"))

        assert missing.status_code == NOT_FOUND
        assert invalid.status_code == BAD_REQUEST
