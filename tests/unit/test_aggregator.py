"""Tests for ResultAggregator."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from loadtally._internal.errors import AggregationError
from loadtally._internal.types import OutputMode
from loadtally.metrics.aggregator import ResultAggregator, aggregate
from loadtally.metrics.models import Result
from loadtally.metrics.stream import ResultStream

if TYPE_CHECKING:
    from collections.abc import Callable


async def _closed_stream(results: list[Result]) -> ResultStream:
    stream = ResultStream()
    for result in results:
        await stream.put(result)
    stream.close()
    return stream


class TestResultAggregatorRecord:
    """Tests for accumulating individual results."""

    def test_success_appends_every_phase(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=1.0)
        aggregator.record(success(0.5, conn=0.1, dns=0.05, req=0.01, delay=0.3, res=0.02))
        report = aggregator.report
        assert report.lats == [0.5]
        assert report.conn_lats == [0.1]
        assert report.dns_lats == [0.05]
        assert report.req_lats == [0.01]
        assert report.delay_lats == [0.3]
        assert report.res_lats == [0.02]

    def test_arrival_order_is_kept(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=1.0)
        for d in (0.3, 0.1, 0.2):
            aggregator.record(success(d, conn=d / 10))
        assert aggregator.report.lats == [0.3, 0.1, 0.2]
        assert aggregator.report.conn_lats == pytest.approx([0.03, 0.01, 0.02])

    def test_failure_only_feeds_error_distribution(self) -> None:
        aggregator = ResultAggregator(total_seconds=1.0)
        aggregator.record(Result.failure(ConnectionError("connection refused")))
        aggregator.record(Result.failure(ConnectionError("connection refused")))
        aggregator.record(Result.failure("timeout"))
        report = aggregator.report
        assert report.error_dist == {"connection refused": 2, "timeout": 1}
        assert report.lats == []
        assert report.status_code_dist == {}

    def test_status_code_distribution(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=1.0)
        for code in (200, 200, 404, 500, 200):
            aggregator.record(success(status_code=code))
        report = aggregator.report
        assert report.status_code_dist == {200: 3, 404: 1, 500: 1}
        assert sum(report.status_code_dist.values()) == report.success_count

    def test_only_positive_content_length_is_counted(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=1.0)
        aggregator.record(success(content_length=100))
        aggregator.record(success(content_length=0))
        aggregator.record(success(content_length=-1))
        aggregator.record(success(content_length=50))
        assert aggregator.report.size_total == 150

    def test_record_after_finalize_raises(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=1.0)
        aggregator.finalize()
        with pytest.raises(AggregationError):
            aggregator.record(success())


class TestResultAggregatorFinalize:
    """Tests for derived statistics."""

    def test_rps(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=10.0)
        for _ in range(100):
            aggregator.record(success())
        report = aggregator.finalize()
        assert report.rps == pytest.approx(10.0)

    def test_failures_do_not_count_towards_rps(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=2.0)
        aggregator.record(success())
        aggregator.record(success())
        aggregator.record(Result.failure("boom"))
        assert aggregator.finalize().rps == pytest.approx(1.0)

    def test_phase_means(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=1.0)
        aggregator.record(success(0.2, conn=0.02, dns=0.01, req=0.002, delay=0.1, res=0.02))
        aggregator.record(success(0.4, conn=0.04, dns=0.03, req=0.004, delay=0.3, res=0.04))
        report = aggregator.finalize()
        assert report.average == pytest.approx(0.3)
        assert report.avg_conn == pytest.approx(0.03)
        assert report.avg_dns == pytest.approx(0.02)
        assert report.avg_req == pytest.approx(0.003)
        assert report.avg_delay == pytest.approx(0.2)
        assert report.avg_res == pytest.approx(0.03)

    def test_zero_successes_gives_zero_rates(self) -> None:
        aggregator = ResultAggregator(total_seconds=5.0)
        aggregator.record(Result.failure("boom"))
        report = aggregator.finalize()
        assert report.rps == 0.0
        assert report.average == 0.0
        assert report.avg_conn == 0.0
        assert report.avg_res == 0.0

    def test_zero_elapsed_time_gives_zero_rps(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=0.0)
        aggregator.record(success(0.1))
        report = aggregator.finalize()
        assert report.rps == 0.0
        assert report.average == pytest.approx(0.1)

    def test_finalize_is_idempotent(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=1.0)
        aggregator.record(success())
        first = aggregator.finalize()
        assert aggregator.finalize() is first
        assert aggregator.finalized


class TestResultAggregatorDrain:
    """Tests for draining a stream."""

    async def test_drain_preserves_invariants(self, success: Callable[..., Result]) -> None:
        results = [
            success(0.1, status_code=200),
            Result.failure("refused"),
            success(0.2, status_code=201),
            success(0.3, status_code=200),
            Result.failure("refused"),
        ]
        report = await ResultAggregator(total_seconds=1.0).drain(await _closed_stream(results))

        assert report.success_count == 3
        for seq in (report.conn_lats, report.dns_lats, report.req_lats, report.delay_lats, report.res_lats):
            assert len(seq) == report.success_count
        assert sum(report.status_code_dist.values()) + sum(report.error_dist.values()) == len(results)
        assert report.total_count == len(results)

    async def test_second_drain_raises(self, success: Callable[..., Result]) -> None:
        aggregator = ResultAggregator(total_seconds=1.0)
        await aggregator.drain(await _closed_stream([success()]))
        with pytest.raises(AggregationError):
            await aggregator.drain(await _closed_stream([success()]))

    async def test_aggregate_helper(self, success: Callable[..., Result]) -> None:
        stream = await _closed_stream([success() for _ in range(4)])
        report = await aggregate(stream, 2.0, "csv")
        assert report.success_count == 4
        assert report.rps == pytest.approx(2.0)
        assert report.output_mode is OutputMode.CSV


class TestOutputModeSelection:
    @pytest.mark.parametrize(
        ("selector", "expected"),
        [
            ("csv", OutputMode.CSV),
            ("CSV", OutputMode.CSV),
            ("text", OutputMode.TEXT),
            ("html", OutputMode.TEXT),
            ("", OutputMode.TEXT),
            (None, OutputMode.TEXT),
            (OutputMode.CSV, OutputMode.CSV),
        ],
    )
    def test_unknown_modes_fall_back_to_text(self, selector: str | OutputMode | None, expected: OutputMode) -> None:
        assert ResultAggregator(1.0, selector).report.output_mode is expected
