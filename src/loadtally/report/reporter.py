"""Text and CSV rendering of a finalized ``Report``."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Final

from loadtally._internal.types import OutputMode
from loadtally.metrics.statistics import (
    PERCENTILES,
    build_histogram,
    nearest_rank_percentiles,
    phase_stats,
    sorted_copy,
)

if TYPE_CHECKING:
    from typing import TextIO

    from loadtally.metrics.models import PhaseStats, Report

BAR_CHAR: Final = "\u220e"

CSV_HEADER: Final = "response-time,DNS+dialup,DNS,Request-write,Response-delay,Response-read"


class Reporter:
    """Writes a report to a text sink in the report's output mode.

    CSV mode dumps one row per successful request in arrival order. Text
    mode prints the summary, histogram, latency distribution, per-phase
    details and the status code and error distributions. Distributions are
    listed in ascending key order.
    """

    def __init__(self, report: Report, sink: TextIO | None = None) -> None:
        """Initialize the reporter.

        Args:
            report: A finalized report.
            sink: Destination for the rendered output. Defaults to stdout.
        """
        self._report = report
        self._sink = sink if sink is not None else sys.stdout

    @property
    def mode(self) -> OutputMode:
        """Return the rendering mode taken from the report."""
        return self._report.output_mode

    def print(self) -> None:
        """Render the report in its configured mode."""
        if self.mode is OutputMode.CSV:
            self.print_csv()
            return
        self.print_summary()

    def print_csv(self) -> None:
        """Write the header and one row per successful request."""
        r = self._report
        self._printf("%s\n", CSV_HEADER)
        for i, val in enumerate(r.lats):
            self._printf(
                "%4.4f,%4.4f,%4.4f,%4.4f,%4.4f,%4.4f\n",
                val,
                r.conn_lats[i],
                r.dns_lats[i],
                r.req_lats[i],
                r.delay_lats[i],
                r.res_lats[i],
            )

    def print_summary(self) -> None:
        """Write the human-readable summary.

        Latency blocks are skipped entirely when no request succeeded;
        the error block is written only when at least one request failed.
        """
        r = self._report
        if r.success_count > 0:
            lats = sorted_copy(r.lats)
            self._printf("Summary:\n")
            self._printf("  Total:\t%4.4f secs\n", r.total_seconds)
            self._printf("  Slowest:\t%4.4f secs\n", lats[-1])
            self._printf("  Fastest:\t%4.4f secs\n", lats[0])
            self._printf("  Average:\t%4.4f secs\n", r.average)
            self._printf("  Requests/sec:\t%4.4f\n", r.rps)
            if r.size_total > 0:
                self._printf("  Total data:\t%d bytes\n", r.size_total)
                self._printf("  Size/request:\t%d bytes\n", r.size_total // r.success_count)
            self._print_histogram(lats)
            self._print_latencies(lats)
            self._printf("\nDetails (Average, Fastest, Slowest):")
            self._print_section(phase_stats("DNS+dialup", r.avg_conn, r.conn_lats))
            self._print_section(phase_stats("DNS-lookup", r.avg_dns, r.dns_lats))
            self._print_section(phase_stats("req write", r.avg_req, r.req_lats))
            self._print_section(phase_stats("resp wait", r.avg_delay, r.delay_lats))
            self._print_section(phase_stats("resp read", r.avg_res, r.res_lats))
            self._print_status_codes()
        if r.error_dist:
            self._print_errors()
        self._printf("\n")

    def _print_histogram(self, sorted_lats: list[float]) -> None:
        self._printf("\nResponse time histogram:\n")
        for bucket in build_histogram(sorted_lats):
            self._printf("  %4.4f [%d]\t|%s\n", bucket.edge, bucket.count, BAR_CHAR * bucket.bar_length)

    def _print_latencies(self, sorted_lats: list[float]) -> None:
        # Unassigned percentiles are omitted; an assigned 0.0 is still printed.
        assigned = nearest_rank_percentiles(sorted_lats)
        self._printf("\nLatency distribution:\n")
        for pctl in PERCENTILES:
            if pctl in assigned:
                self._printf("  %d%% in %4.4f secs\n", pctl, assigned[pctl])

    def _print_section(self, stats: PhaseStats) -> None:
        self._printf("\n  %s:\t", stats.label)
        self._printf(" %4.4f secs, %4.4f secs, %4.4f secs", stats.average, stats.fastest, stats.slowest)

    def _print_status_codes(self) -> None:
        self._printf("\n\nStatus code distribution:\n")
        for code, num in sorted(self._report.status_code_dist.items()):
            self._printf("  [%d]\t%d responses\n", code, num)

    def _print_errors(self) -> None:
        self._printf("\nError distribution:\n")
        for err, num in sorted(self._report.error_dist.items()):
            self._printf("  [%d]\t%s\n", num, err)

    def _printf(self, fmt: str, *args: object) -> None:
        self._sink.write(fmt % args if args else fmt)
