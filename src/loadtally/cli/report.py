"""``loadtally report`` — replay a recorded result file into a report."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console

from loadtally._internal.config import load_config
from loadtally._internal.errors import LoadTallyError
from loadtally._internal.logging import get_logger, setup_logging
from loadtally.metrics.aggregator import ResultAggregator
from loadtally.metrics.store import feed_stream, load_results
from loadtally.metrics.stream import ResultStream
from loadtally.report.reporter import Reporter

if TYPE_CHECKING:
    from loadtally.metrics.models import Report, Result

console = Console(stderr=True)
logger = get_logger("cli.report")


async def _replay(
    results: list[Result],
    total_seconds: float,
    output: str,
    queue_size: int,
) -> Report:
    """Run the producer and the aggregator side by side over one stream."""
    stream = ResultStream(maxsize=queue_size)
    aggregator = ResultAggregator(total_seconds, output)
    _, report = await asyncio.gather(
        feed_stream(results, stream),
        aggregator.drain(stream),
    )
    return report


def report_cmd(
    results_file: Path = typer.Argument(
        ...,
        help="JSON Lines file with one recorded result per line.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    total: float = typer.Option(
        ...,
        "--total",
        "-t",
        help="Wall-clock duration of the run in seconds.",
        min=0.0,
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output mode: csv, or text for the summary (default: $LOADTALLY_OUTPUT or text).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging.",
    ),
) -> None:
    """Print the latency report for a recorded load test run."""
    try:
        config = load_config()
    except LoadTallyError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    setup_logging(logging.DEBUG if verbose else logging.WARNING, json_format=config.log_json)
    mode = output if output is not None else config.output_mode.value

    try:
        results = load_results(results_file)
        report = asyncio.run(_replay(results, total, mode, config.queue_size))
    except LoadTallyError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    logger.debug("Rendering %s report for %s", report.output_mode.value, results_file)
    Reporter(report, sys.stdout).print()
