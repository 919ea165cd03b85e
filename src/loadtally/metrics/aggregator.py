"""Single-pass aggregation of a result stream into a ``Report``.

The ``ResultAggregator`` drains a ``ResultStream`` until its producer
closes it, splitting outcomes into successes and failures. Successful
results feed the ordered per-phase duration sequences and running sums;
failures only feed the error distribution.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loadtally._internal.errors import AggregationError
from loadtally._internal.logging import get_logger
from loadtally._internal.types import OutputMode
from loadtally.metrics.models import Report

if TYPE_CHECKING:
    from loadtally.metrics.models import Result
    from loadtally.metrics.stream import ResultStream

logger = get_logger("metrics.aggregator")


class ResultAggregator:
    """Accumulates results for exactly one run.

    Lifecycle: construct, ``record``/``drain`` every result, ``finalize``.
    After ``finalize`` the aggregator refuses further input.
    """

    def __init__(
        self,
        total_seconds: float,
        output: str | OutputMode | None = OutputMode.TEXT,
    ) -> None:
        """Initialize an empty aggregator.

        Args:
            total_seconds: Wall-clock duration of the run, used for RPS.
            output: Output mode selector. Anything other than ``"csv"``
                selects the text summary.
        """
        mode = OutputMode.parse(output)
        if isinstance(output, str) and output.strip().lower() != mode.value:
            logger.debug("Unknown output mode %r, using %s", output, mode.value)
        self._report = Report(total_seconds=total_seconds, output_mode=mode)
        self._finalized = False

    @property
    def report(self) -> Report:
        """Return the report being populated."""
        return self._report

    @property
    def finalized(self) -> bool:
        """Return True once ``finalize`` has run."""
        return self._finalized

    def record(self, result: Result) -> None:
        """Accumulate a single result.

        Args:
            result: The request outcome to fold into the report.

        Raises:
            AggregationError: If the aggregator was already finalized.
        """
        if self._finalized:
            msg = "cannot record into a finalized report"
            raise AggregationError(msg)

        r = self._report
        if not result.is_success:
            message = str(result.error)
            r.error_dist[message] = r.error_dist.get(message, 0) + 1
            return

        r.lats.append(result.duration)
        r.conn_lats.append(result.conn_duration)
        r.dns_lats.append(result.dns_duration)
        r.req_lats.append(result.req_duration)
        r.delay_lats.append(result.delay_duration)
        r.res_lats.append(result.res_duration)

        r.total_sum += result.duration
        r.conn_sum += result.conn_duration
        r.dns_sum += result.dns_duration
        r.req_sum += result.req_duration
        r.delay_sum += result.delay_duration
        r.res_sum += result.res_duration

        r.status_code_dist[result.status_code] = r.status_code_dist.get(result.status_code, 0) + 1
        if result.content_length > 0:
            r.size_total += result.content_length

    async def drain(self, stream: ResultStream) -> Report:
        """Consume the stream until it is closed, then finalize.

        Blocks for as long as the producer keeps the stream open.

        Args:
            stream: Result stream fed by the request executor.

        Returns:
            The finalized report.

        Raises:
            AggregationError: If the aggregator was already finalized.
        """
        if self._finalized:
            msg = "report was already populated from a stream"
            raise AggregationError(msg)

        async for result in stream:
            self.record(result)
        return self.finalize()

    def finalize(self) -> Report:
        """Compute RPS and per-phase means.

        With zero successes every mean and the RPS are 0.0. A non-positive
        run duration also gives an RPS of 0.0.

        Returns:
            The finalized report.
        """
        if self._finalized:
            return self._report

        r = self._report
        n = r.success_count
        if n > 0:
            r.rps = n / r.total_seconds if r.total_seconds > 0 else 0.0
            r.average = r.total_sum / n
            r.avg_conn = r.conn_sum / n
            r.avg_dns = r.dns_sum / n
            r.avg_req = r.req_sum / n
            r.avg_delay = r.delay_sum / n
            r.avg_res = r.res_sum / n
        else:
            r.rps = 0.0
            r.average = r.avg_conn = r.avg_dns = 0.0
            r.avg_req = r.avg_delay = r.avg_res = 0.0

        self._finalized = True
        logger.debug(
            "Aggregated %d results (%d successes, %d errors)",
            r.total_count,
            n,
            r.error_count,
            extra={"successes": n, "errors": r.error_count},
        )
        return r


async def aggregate(
    stream: ResultStream,
    total_seconds: float,
    output: str | OutputMode | None = OutputMode.TEXT,
) -> Report:
    """Drain ``stream`` into a new finalized ``Report``.

    Args:
        stream: Result stream fed by the request executor.
        total_seconds: Wall-clock duration of the run.
        output: Output mode selector.

    Returns:
        The finalized report.
    """
    return await ResultAggregator(total_seconds, output).drain(stream)
