"""LoadTally — aggregate and report HTTP load test results."""

from __future__ import annotations

from loadtally._internal.types import OutputMode
from loadtally.metrics.aggregator import ResultAggregator, aggregate
from loadtally.metrics.models import Report, Result
from loadtally.metrics.stream import ResultStream
from loadtally.report.reporter import Reporter

__version__ = "0.1.0"

__all__ = [
    "OutputMode",
    "Report",
    "Reporter",
    "Result",
    "ResultAggregator",
    "ResultStream",
    "aggregate",
]
