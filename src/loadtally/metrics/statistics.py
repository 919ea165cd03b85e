"""Latency statistics computed after aggregation.

All functions take plain sequences of seconds and never modify them.
Percentiles use the nearest-rank method: every reported value is an
observed sample, never an interpolation between two.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

import numpy as np

from loadtally.metrics.models import HistogramBucket, PhaseStats

if TYPE_CHECKING:
    from collections.abc import Sequence

PERCENTILES: Final = (10, 25, 50, 75, 90, 95, 99)
BUCKET_COUNT: Final = 10
BAR_WIDTH: Final = 40


def sorted_copy(lats: Sequence[float]) -> list[float]:
    """Return an ascending copy of ``lats``, leaving the input untouched."""
    return np.sort(np.asarray(lats, dtype=np.float64)).tolist()


def nearest_rank_percentiles(
    sorted_lats: Sequence[float],
    targets: Sequence[int] = PERCENTILES,
) -> dict[int, float]:
    """Assign latency percentiles in one pass over sorted samples.

    Sample ``i`` of ``n`` has rank ``i * 100 // n``. Walking the samples in
    order, the first sample whose rank reaches the next unfilled target is
    assigned to it. A sample fills at most one target, so small sample
    counts leave the higher targets unassigned.

    Args:
        sorted_lats: Latencies in ascending order.
        targets: Percentiles to fill, in ascending order.

    Returns:
        Mapping of percentile to latency for every assigned target.
        Empty when there are no samples.
    """
    n = len(sorted_lats)
    assigned: dict[int, float] = {}
    j = 0
    for i in range(n):
        if j >= len(targets):
            break
        if i * 100 // n >= targets[j]:
            assigned[targets[j]] = sorted_lats[i]
            j += 1
    return assigned


def bucket_edges(fastest: float, slowest: float, count: int = BUCKET_COUNT) -> list[float]:
    """Return ``count + 1`` upper bucket edges spanning ``[fastest, slowest]``.

    The last edge is ``slowest`` itself rather than ``fastest + count * width``,
    so rounding can never leave the maximum sample outside every bucket.
    """
    width = (slowest - fastest) / count
    edges = [fastest + width * i for i in range(count)]
    edges.append(slowest)
    return edges


def build_histogram(sorted_lats: Sequence[float]) -> list[HistogramBucket]:
    """Bucket sorted latencies into a fixed-width histogram.

    Each sample lands in the first bucket whose edge is >= the sample. The
    bucket cursor only moves forward, which is why the input must be sorted.
    When every sample is equal, all of them fall into the first bucket.

    Args:
        sorted_lats: Latencies in ascending order.

    Returns:
        One bucket per edge, or an empty list when there are no samples.
    """
    if not sorted_lats:
        return []

    edges = bucket_edges(sorted_lats[0], sorted_lats[-1])
    counts = [0] * len(edges)
    last = len(edges) - 1
    bi = 0
    i = 0
    while i < len(sorted_lats):
        if sorted_lats[i] <= edges[bi] or bi == last:
            counts[bi] += 1
            i += 1
        else:
            bi += 1

    max_count = max(counts)
    return [
        HistogramBucket(
            edge=edge,
            count=count,
            bar_length=(count * BAR_WIDTH + max_count // 2) // max_count if max_count > 0 else 0,
        )
        for edge, count in zip(edges, counts, strict=True)
    ]


def phase_stats(label: str, average: float, lats: Sequence[float]) -> PhaseStats:
    """Summarize one request phase.

    Args:
        label: Display name of the phase.
        average: Mean duration computed during aggregation.
        lats: Phase durations in arrival order. Not modified.

    Returns:
        The phase's average with its own fastest and slowest sample, or
        zeros for both when there are no samples.
    """
    if not lats:
        return PhaseStats(label=label, average=average, fastest=0.0, slowest=0.0)
    ordered = sorted_copy(lats)
    return PhaseStats(label=label, average=average, fastest=ordered[0], slowest=ordered[-1])
