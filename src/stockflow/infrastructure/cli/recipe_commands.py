"""CLI commands for browsing and managing recipes."""

from __future__ import annotations

import click

from stockflow.application.dto import RecipeDTO
from stockflow.application.list_recipes import AvailableRecipesHandler
from stockflow.application.manage_recipes import (
    CreateRecipeHandler,
    DeactivateRecipeHandler,
    UpdateRecipeHandler,
)
from stockflow.application.responses import CREATED, respond
from stockflow.domain.exceptions import DomainException
from stockflow.domain.model.recipe import ConversionType
from stockflow.infrastructure.bootstrap import conversion_workflow, recipe_service
from stockflow.infrastructure.cli.output import echo_response, json_option


def _display_recipe(dto: RecipeDTO) -> None:
    click.echo(f"Recipe #{dto.id}  {dto.name}  ({dto.conversion_type}, status={dto.status})")
    click.echo(f"  Ratio:      {dto.base_ratio} {dto.ratio_unit}")
    categories = ", ".join(str(c) for c in dto.input_category_ids) or "-"
    click.echo(f"  Inputs:     {categories}")
    output = dto.output_category_id if dto.output_category_id is not None else "-"
    click.echo(f"  Output:     {output}")
    tracked = "tracked" if dto.track_variance else "not tracked"
    click.echo(f"  Variance:   {dto.acceptable_variance} ({tracked})")


def _recipe_options(func):
    """Options shared by ``create`` and ``update``; unset ones stay None."""
    options = [
        click.option("--description", default=None),
        click.option("--slug", default=None),
        click.option("--type", "conversion_type",
                     type=click.Choice([t.value for t in ConversionType]), default=None),
        click.option("--unit", "ratio_unit", default=None, help="Ratio unit, e.g. 'g:g'."),
        click.option("--input-category", "input_category_ids", type=int, multiple=True,
                     help="Accepted input category (repeatable)."),
        click.option("--output-category", "output_category_id", type=int, default=None),
        click.option("--expected-yield", "expected_yield_ratio", default=None,
                     help="Expected yield ratio between 0 and 1."),
        click.option("--typical-yield", "typical_yield_ratio", default=None,
                     help="Typical yield ratio between 0 and 1."),
        click.option("--acceptable-variance", default=None,
                     help="Allowed deviation from the expected output, between 0 and 1."),
        click.option("--track-variance/--no-track-variance", default=None),
        click.option("--allow-override/--no-allow-override", default=None),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _given(options: dict) -> dict:
    values = {key: value for key, value in options.items() if value is not None}
    if "input_category_ids" in values:
        if values["input_category_ids"]:
            values["input_category_ids"] = frozenset(values["input_category_ids"])
        else:
            del values["input_category_ids"]
    if "conversion_type" in values:
        values["conversion_type"] = ConversionType(values["conversion_type"])
    return values


@click.command("list")
@click.option(
    "--category",
    "category_ids",
    type=int,
    multiple=True,
    help="Only recipes accepting this input category (repeatable).",
)
@json_option
def recipe_list(category_ids: tuple[int, ...], as_json: bool) -> None:
    """List active recipes."""
    handler = AvailableRecipesHandler(conversion_workflow())

    if as_json:
        echo_response(respond(lambda: handler.handle(list(category_ids))))
        return

    try:
        recipes = handler.handle(list(category_ids))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not recipes:
        click.echo("No recipes found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Ratio':>8} {'Unit':<8} {'Variance':>9}")
    click.echo("-" * 59)
    for r in recipes:
        click.echo(
            f"{r.id:<6} {r.name:<24} {r.base_ratio:>8} {r.ratio_unit:<8} {r.acceptable_variance:>9}"
        )


@click.command("create")
@click.option("--name", required=True, help="Recipe name.")
@click.option("--ratio", "base_ratio", required=True, help="Output per unit of input.")
@_recipe_options
@json_option
def recipe_create(name: str, base_ratio: str, as_json: bool, **options) -> None:
    """Create a recipe."""
    handler = CreateRecipeHandler(recipe_service())
    attributes = _given(options)

    if as_json:
        echo_response(respond(lambda: handler.handle(name, base_ratio, **attributes), status=CREATED))
        return

    try:
        dto = handler.handle(name, base_ratio, **attributes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_recipe(dto)


@click.command("update")
@click.option("--id", "recipe_id", required=True, type=int, help="Recipe ID.")
@click.option("--name", default=None)
@click.option("--ratio", "base_ratio", default=None, help="Output per unit of input.")
@_recipe_options
@json_option
def recipe_update(recipe_id: int, as_json: bool, **options) -> None:
    """Change the given fields of a recipe."""
    handler = UpdateRecipeHandler(recipe_service())
    changes = _given(options)

    if as_json:
        echo_response(respond(lambda: handler.handle(recipe_id, **changes)))
        return

    try:
        dto = handler.handle(recipe_id, **changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_recipe(dto)


@click.command("deactivate")
@click.option("--id", "recipe_id", required=True, type=int, help="Recipe ID.")
@json_option
def recipe_deactivate(recipe_id: int, as_json: bool) -> None:
    """Retire a recipe; it no longer shows up for new conversions."""
    handler = DeactivateRecipeHandler(recipe_service())

    if as_json:
        echo_response(respond(lambda: handler.handle(recipe_id)))
        return

    try:
        dto = handler.handle(recipe_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Recipe #{dto.id} '{dto.name}' deactivated.")
