import click
from pydantic import ValidationError

from stockflow.infrastructure.bootstrap import settings
from stockflow.infrastructure.cli.conversion_commands import (
    conversion_cancel,
    conversion_complete,
    conversion_direct,
    conversion_history,
    conversion_show,
    conversion_start,
    conversion_stats,
    conversion_validate,
)
from stockflow.infrastructure.cli.inventory_commands import inventory_init, inventory_status
from stockflow.infrastructure.cli.recipe_commands import (
    recipe_create,
    recipe_deactivate,
    recipe_list,
    recipe_update,
)
from stockflow.infrastructure.logging_config import configure_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool) -> None:
    """stockflow — location inventory and recipe conversions"""
    try:
        config = settings()
    except ValidationError as exc:
        raise click.ClickException(f"Invalid STOCKFLOW_* configuration:\n{exc}")
    configure_logging("DEBUG" if verbose else config.log_level)


@cli.group()
def inventory() -> None:
    """Provision and inspect per-location inventory."""


@cli.group()
def conversion() -> None:
    """Run recipe and direct conversions."""


@cli.group()
def recipe() -> None:
    """Browse and manage conversion recipes."""


# Register subcommands
inventory.add_command(inventory_init)
inventory.add_command(inventory_status)
conversion.add_command(conversion_validate)
conversion.add_command(conversion_start)
conversion.add_command(conversion_complete)
conversion.add_command(conversion_cancel)
conversion.add_command(conversion_direct)
conversion.add_command(conversion_show)
conversion.add_command(conversion_history)
conversion.add_command(conversion_stats)
recipe.add_command(recipe_list)
recipe.add_command(recipe_create)
recipe.add_command(recipe_update)
recipe.add_command(recipe_deactivate)
