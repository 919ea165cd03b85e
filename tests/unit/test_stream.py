"""Tests for ResultStream."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from loadtally._internal.errors import StreamClosedError
from loadtally.metrics.models import Result
from loadtally.metrics.stream import ResultStream

if TYPE_CHECKING:
    from collections.abc import Callable


async def _collect(stream: ResultStream) -> list[Result]:
    return [result async for result in stream]


class TestResultStream:
    async def test_yields_items_in_order_until_closed(self, success: Callable[..., Result]) -> None:
        stream = ResultStream()
        items = [success(duration=float(i)) for i in range(5)]
        for item in items:
            await stream.put(item)
        stream.close()

        assert await _collect(stream) == items

    async def test_empty_closed_stream_ends_immediately(self) -> None:
        stream = ResultStream()
        stream.close()
        assert await _collect(stream) == []

    async def test_put_after_close_raises(self, success: Callable[..., Result]) -> None:
        stream = ResultStream()
        stream.close()
        with pytest.raises(StreamClosedError):
            await stream.put(success())
        with pytest.raises(StreamClosedError):
            stream.put_nowait(success())

    async def test_close_is_idempotent(self) -> None:
        stream = ResultStream()
        stream.close()
        stream.close()
        assert stream.closed
        assert await _collect(stream) == []

    async def test_consumer_waits_for_slow_producer(self, success: Callable[..., Result]) -> None:
        stream = ResultStream()

        async def produce() -> None:
            for i in range(3):
                await asyncio.sleep(0.01)
                await stream.put(success(duration=float(i)))
            stream.close()

        _, collected = await asyncio.gather(produce(), _collect(stream))
        assert [r.duration for r in collected] == [0.0, 1.0, 2.0]

    async def test_bounded_stream_with_concurrent_producer(self, success: Callable[..., Result]) -> None:
        stream = ResultStream(maxsize=2)

        async def produce() -> None:
            for i in range(10):
                await stream.put(success(duration=float(i)))
            stream.close()

        _, collected = await asyncio.gather(produce(), _collect(stream))
        assert len(collected) == 10
        assert stream.put_count == 10

    async def test_close_on_full_bounded_stream(self, success: Callable[..., Result]) -> None:
        stream = ResultStream(maxsize=2)
        stream.put_nowait(success())
        stream.put_nowait(success())
        with pytest.raises(asyncio.QueueFull):
            stream.put_nowait(success())
        stream.close()
        assert len(await _collect(stream)) == 2

    async def test_second_iteration_is_empty(self, success: Callable[..., Result]) -> None:
        stream = ResultStream()
        await stream.put(success())
        stream.close()
        assert len(await _collect(stream)) == 1
        assert await _collect(stream) == []
