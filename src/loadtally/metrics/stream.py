"""Closable asynchronous result stream between request execution and reporting."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Final

from loadtally._internal.errors import StreamClosedError
from loadtally._internal.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from loadtally.metrics.models import Result

logger = get_logger("metrics.stream")


class _EndOfStream:
    """Sentinel type marking the end of a stream."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<end of stream>"


_END: Final = _EndOfStream()


class ResultStream:
    """Single-producer, single-consumer queue of ``Result`` objects.

    The producer ``put``s results and calls ``close()`` exactly once when
    every request has completed. The consumer iterates with ``async for``;
    iteration ends after the last result put before ``close()``. A consumer
    parked on an empty queue is woken by an end-of-stream sentinel.

    Attributes:
        maxsize: Maximum number of buffered results, 0 for unbounded.
    """

    def __init__(self, maxsize: int = 0) -> None:
        """Initialize an open, empty stream.

        Args:
            maxsize: Maximum number of buffered results, 0 for unbounded.
        """
        self.maxsize = maxsize
        self._queue: asyncio.Queue[Result | _EndOfStream] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._exhausted = False
        self._put_count = 0

    @property
    def closed(self) -> bool:
        """Return True once ``close()`` has been called."""
        return self._closed

    @property
    def put_count(self) -> int:
        """Return the number of results put on the stream so far."""
        return self._put_count

    async def put(self, result: Result) -> None:
        """Enqueue a result, waiting for room on a bounded stream.

        Raises:
            StreamClosedError: If the stream was already closed.
        """
        self._check_open()
        await self._queue.put(result)
        self._put_count += 1

    def put_nowait(self, result: Result) -> None:
        """Enqueue a result without waiting.

        Raises:
            StreamClosedError: If the stream was already closed.
            asyncio.QueueFull: If a bounded stream has no room.
        """
        self._check_open()
        self._queue.put_nowait(result)
        self._put_count += 1

    def close(self) -> None:
        """Mark the end of the stream.

        Idempotent. The sentinel is only needed when the queue is empty,
        so it always fits, even on a full bounded stream.
        """
        if self._closed:
            return
        self._closed = True
        if self._queue.empty():
            self._queue.put_nowait(_END)
        logger.debug("Result stream closed after %d results", self._put_count)

    def __aiter__(self) -> AsyncIterator[Result]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Result]:
        if self._exhausted:
            return
        while True:
            if self._closed and self._queue.empty():
                self._exhausted = True
                return
            item = await self._queue.get()
            if isinstance(item, _EndOfStream):
                self._exhausted = True
                return
            yield item

    def _check_open(self) -> None:
        if self._closed:
            msg = "cannot put a result on a closed stream"
            raise StreamClosedError(msg)
