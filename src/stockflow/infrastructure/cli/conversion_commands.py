"""CLI commands for the conversion workflow."""

from __future__ import annotations

import click

from stockflow.application.cancel_conversion import CancelConversionHandler
from stockflow.application.complete_conversion import CompleteConversionHandler
from stockflow.application.direct_conversion import DirectConversionHandler
from stockflow.application.dto import ConversionDTO
from stockflow.application.responses import CREATED, respond
from stockflow.application.show_conversions import (
    ConversionHistoryHandler,
    ConversionStatsHandler,
    ShowConversionHandler,
)
from stockflow.application.start_conversion import StartConversionHandler
from stockflow.application.validate_conversion import ValidateConversionHandler
from stockflow.domain.exceptions import ConversionRejected, DomainException
from stockflow.infrastructure.bootstrap import conversion_workflow
from stockflow.infrastructure.cli.output import echo_response, json_option


def _display_conversion(dto: ConversionDTO) -> None:
    """Shared formatting for displaying a conversion."""
    title = f"recipe #{dto.recipe_id}" if dto.recipe_id is not None else "direct"
    click.echo(f"Conversion #{dto.id}  ({title}, status={dto.status})")
    click.echo(f"Location: {dto.location_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Input product':<16} {dto.input_product_id:>8}   qty {dto.input_quantity}")
    output = dto.output_product_id if dto.output_product_id is not None else "-"
    click.echo(f"  {'Output product':<16} {output:>8}   expected {dto.expected_output}")

    if dto.actual_output is not None:
        click.echo(f"  {'Actual output':<16} {dto.actual_output:>8}")
    if dto.variance_percentage is not None:
        marker = "  (outside acceptable range)" if dto.flagged else ""
        click.echo(f"  {'Variance':<16} {float(dto.variance_percentage):>7.2f}%{marker}")
    if dto.variance_reasons:
        click.echo(f"  Reasons: {', '.join(dto.variance_reasons)}")
    if dto.notes:
        click.echo(f"  Notes: {dto.notes}")
    if dto.cancel_reason:
        click.echo(f"  Cancelled: {dto.cancel_reason}")
    for warning in dto.warnings:
        click.echo(f"  ! {warning}")


def _parse_reasons(raw: str | None) -> list[str]:
    """Parse 'spillage, moisture_loss' into a list of reason codes."""
    if not raw:
        return []
    return [code.strip() for code in raw.split(",") if code.strip()]


@click.command("validate")
@click.option("--recipe", "recipe_id", required=True, type=int, help="Recipe ID.")
@click.option("--product", "product_id", required=True, type=int, help="Input product ID.")
@click.option("--location", "location_id", required=True, type=int, help="Location ID.")
@click.option("--quantity", required=True, help="Input quantity.")
def conversion_validate(recipe_id: int, product_id: int, location_id: int, quantity: str) -> None:
    """Check whether a conversion could start now (changes nothing)."""
    handler = ValidateConversionHandler(conversion_workflow())
    result = handler.handle(recipe_id, product_id, location_id, quantity)

    for warning in result.warnings:
        click.echo(f"warning: {warning}")
    if not result.valid:
        for error in result.errors:
            click.echo(f"error: {error}", err=True)
        raise click.ClickException("Conversion is not valid")
    click.echo("Conversion is valid.")


@click.command("start")
@click.option("--recipe", "recipe_id", required=True, type=int, help="Recipe ID.")
@click.option("--product", "product_id", required=True, type=int, help="Input product ID.")
@click.option("--location", "location_id", required=True, type=int, help="Location ID.")
@click.option("--quantity", required=True, help="Input quantity to convert.")
@click.option("--output-product", "output_product_id", type=int, default=None,
              help="Product that receives the output (can be left for later).")
@click.option("--notes", default="", help="Free-form notes.")
@json_option
def conversion_start(
    recipe_id: int,
    product_id: int,
    location_id: int,
    quantity: str,
    output_product_id: int | None,
    notes: str,
    as_json: bool,
) -> None:
    """Deduct input stock and start a recipe conversion."""
    handler = StartConversionHandler(conversion_workflow())

    if as_json:
        echo_response(respond(
            lambda: handler.handle(
                recipe_id, product_id, location_id, quantity,
                output_product_id=output_product_id, notes=notes,
            ),
            status=CREATED,
        ))
        return

    try:
        dto = handler.handle(
            recipe_id, product_id, location_id, quantity,
            output_product_id=output_product_id, notes=notes,
        )
    except ConversionRejected as exc:
        for error in exc.errors:
            click.echo(f"error: {error}", err=True)
        raise click.ClickException("Conversion rejected")
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_conversion(dto)
    click.echo()
    click.echo(f"Record the yield with: stockflow conversion complete --id {dto.id} --output <qty>")


@click.command("complete")
@click.option("--id", "conversion_id", required=True, type=int, help="Conversion ID.")
@click.option("--output", "actual_output", required=True, help="Measured output quantity.")
@click.option("--reasons", default=None, help="Variance reason codes as 'code,code'.")
@click.option("--notes", default=None, help="Replace the conversion notes.")
@json_option
def conversion_complete(
    conversion_id: int,
    actual_output: str,
    reasons: str | None,
    notes: str | None,
    as_json: bool,
) -> None:
    """Record the actual yield of a conversion."""
    handler = CompleteConversionHandler(conversion_workflow())

    if as_json:
        echo_response(respond(
            lambda: handler.handle(conversion_id, actual_output, _parse_reasons(reasons), notes)
        ))
        return

    try:
        dto = handler.handle(conversion_id, actual_output, _parse_reasons(reasons), notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_conversion(dto)


@click.command("cancel")
@click.option("--id", "conversion_id", required=True, type=int, help="Conversion ID.")
@click.option("--reason", default=None, help="Why the conversion was abandoned.")
@json_option
def conversion_cancel(conversion_id: int, reason: str | None, as_json: bool) -> None:
    """Cancel an open conversion (returns the input stock)."""
    handler = CancelConversionHandler(conversion_workflow())

    if as_json:
        echo_response(respond(lambda: handler.handle(conversion_id, reason)))
        return

    try:
        handler.handle(conversion_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Conversion #{conversion_id} cancelled — input stock restored.")


@click.command("direct")
@click.option("--from-product", "from_product_id", required=True, type=int)
@click.option("--to-product", "to_product_id", required=True, type=int)
@click.option("--location", "location_id", required=True, type=int)
@click.option("--from-quantity", required=True, help="Quantity taken from the input product.")
@click.option("--to-quantity", required=True, help="Quantity added to the output product.")
@click.option("--notes", default="")
def conversion_direct(
    from_product_id: int,
    to_product_id: int,
    location_id: int,
    from_quantity: str,
    to_quantity: str,
    notes: str,
) -> None:
    """Convert stock between two products without a recipe."""
    handler = DirectConversionHandler(conversion_workflow())

    try:
        dto = handler.handle(
            from_product_id, to_product_id, location_id, from_quantity, to_quantity, notes
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_conversion(dto)


@click.command("show")
@click.option("--id", "conversion_id", required=True, type=int, help="Conversion ID.")
def conversion_show(conversion_id: int) -> None:
    """Show one conversion."""
    handler = ShowConversionHandler(conversion_workflow())

    try:
        dto = handler.handle(conversion_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_conversion(dto)


@click.command("history")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
def conversion_history(product_id: int) -> None:
    """List conversions that used or produced a product, newest first."""
    handler = ConversionHistoryHandler(conversion_workflow())
    rows = handler.handle(product_id)

    if not rows:
        click.echo("No conversions found.")
        return

    click.echo(
        f"{'ID':<6} {'Status':<16} {'Input':>10} {'Expected':>10} {'Actual':>10} {'Var %':>8}"
    )
    click.echo("-" * 65)
    for row in rows:
        variance = f"{float(row.variance_percentage):.2f}" if row.variance_percentage else "-"
        click.echo(
            f"{row.id:<6} {row.status:<16} {row.input_quantity:>10} "
            f"{row.expected_output:>10} {row.actual_output or '-':>10} {variance:>8}"
        )


@click.command("stats")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
def conversion_stats(product_id: int) -> None:
    """Show conversion totals and average variance for a product."""
    handler = ConversionStatsHandler(conversion_workflow())
    stats = handler.handle(product_id)

    click.echo(f"Product {product_id}")
    click.echo(f"  Conversions:      {stats.total_conversions}")
    click.echo(f"  Total input:      {stats.total_input}")
    click.echo(f"  Total output:     {stats.total_output}")
    click.echo(f"  Average variance: {stats.average_variance}%")
    click.echo(f"  Efficiency:       {stats.efficiency_rate}%")
