"""Simulated run — feed synthetic results through the reporting pipeline.

A stand-in producer emits randomized request outcomes onto a
``ResultStream`` while the aggregator drains it concurrently. Run it with:

    python examples/simulated_run.py          # text summary
    python examples/simulated_run.py csv      # CSV dump
"""

from __future__ import annotations

import asyncio
import random
import sys
import time

from loadtally import Reporter, Result, ResultAggregator, ResultStream


async def produce(stream: ResultStream, requests: int, concurrency: int) -> None:
    """Emit ``requests`` outcomes from ``concurrency`` fake workers, then close."""
    remaining = iter(range(requests))

    async def worker() -> None:
        for _ in remaining:
            await asyncio.sleep(random.uniform(0.0, 0.002))
            if random.random() < 0.03:
                await stream.put(Result.failure("dial tcp 127.0.0.1:8080: connection refused"))
                continue
            dns = random.uniform(0.0, 0.002)
            conn = dns + random.uniform(0.0005, 0.004)
            req = random.uniform(0.0001, 0.0005)
            delay = random.lognormvariate(-3.5, 0.6)
            res = random.uniform(0.0002, 0.003)
            await stream.put(
                Result.success(
                    conn + req + delay + res,
                    status_code=random.choices((200, 404, 500), weights=(95, 3, 2))[0],
                    conn=conn,
                    dns=dns,
                    req=req,
                    delay=delay,
                    res=res,
                    content_length=random.randint(200, 2048),
                )
            )

    await asyncio.gather(*(worker() for _ in range(concurrency)))
    stream.close()


async def main(output: str) -> None:
    stream = ResultStream(maxsize=64)
    start = time.monotonic()
    producer = asyncio.create_task(produce(stream, requests=500, concurrency=20))
    aggregator = ResultAggregator(total_seconds=0.0, output=output)
    async for result in stream:
        aggregator.record(result)
    await producer
    # Elapsed time is only known once the producer is done.
    aggregator.report.total_seconds = time.monotonic() - start
    Reporter(aggregator.finalize(), sys.stdout).print()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "text"))
