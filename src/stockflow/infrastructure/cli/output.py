"""Machine-readable output shared by the CLI commands.

With ``--json`` a command prints the same ``ApiResponse`` envelope an HTTP
caller would get and exits non-zero when the status code is an error.
"""

from __future__ import annotations

import json

import click

from stockflow.application.responses import ApiResponse

json_option = click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the response envelope as JSON.",
)


def echo_response(response: ApiResponse) -> None:
    click.echo(json.dumps(response.body, indent=2, default=str))
    if not response.ok:
        click.get_current_context().exit(1)
