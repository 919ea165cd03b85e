"""Main Typer application — entry point for the ``loadtally`` CLI."""

from __future__ import annotations

import typer

from loadtally import __version__
from loadtally.cli.report import report_cmd

app = typer.Typer(
    name="loadtally",
    help="Latency and throughput reports for HTTP load test results.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("report", help="Print a report from a recorded result file.")(report_cmd)


def _version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version was passed.
    """
    if value:
        typer.echo(f"loadtally {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """LoadTally — latency reports for HTTP load tests."""
