"""CLI commands for location inventory provisioning."""

from __future__ import annotations

import click

from stockflow.application.check_inventory_status import CheckInventoryStatusHandler
from stockflow.application.initialize_inventory import InitializeInventoryHandler
from stockflow.application.responses import respond
from stockflow.domain.exceptions import DomainException
from stockflow.infrastructure.bootstrap import provisioning_service
from stockflow.infrastructure.cli.output import echo_response, json_option


@click.command("init")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", default="0", show_default=True, help="Initial quantity per location.")
@json_option
def inventory_init(product_id: int, quantity: str, as_json: bool) -> None:
    """Create an inventory record for a product at every active location."""
    handler = InitializeInventoryHandler(provisioning_service())

    if as_json:
        echo_response(respond(lambda: handler.handle(product_id, quantity)))
        return

    try:
        result = handler.handle(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(result.message)
    if result.initialized_locations:
        click.echo(f"Locations: {', '.join(str(i) for i in result.initialized_locations)}")
    for error in result.errors:
        click.echo(f"  ! {error}", err=True)
    if not result.success:
        raise click.ClickException("No location was initialized")


@click.command("status")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@json_option
def inventory_status(product_id: int, as_json: bool) -> None:
    """Show which active locations are missing a record for a product."""
    handler = CheckInventoryStatusHandler(provisioning_service())

    if as_json:
        echo_response(respond(lambda: handler.handle(product_id)))
        return

    status = handler.handle(product_id)

    if status.total_locations == 0:
        click.echo("Inventory status unknown (no locations could be listed).")
        return

    if status.has_inventory:
        click.echo(f"Product {product_id} is stocked at all {status.total_locations} locations.")
        return

    click.echo(
        f"Product {product_id} is missing at {len(status.missing_locations)}"
        f"/{status.total_locations} locations: "
        f"{', '.join(str(i) for i in status.missing_locations)}"
    )
