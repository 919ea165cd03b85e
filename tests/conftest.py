"""Shared test fixtures for the LoadTally test suite."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from loadtally.metrics.models import Result

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


# =============================================================================
# Pytest configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    for item in items:
        test_path = str(item.fspath)
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/e2e/" in test_path:
            item.add_marker(pytest.mark.e2e)


@pytest.fixture(autouse=True)
def _reset_loadtally_logger() -> Iterator[None]:
    """Drop handlers installed by ``setup_logging`` so tests stay isolated."""
    yield
    logger = logging.getLogger("loadtally")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# =============================================================================
# Result factories
# =============================================================================


def make_success(
    duration: float = 0.1,
    *,
    status_code: int = 200,
    conn: float = 0.01,
    dns: float = 0.005,
    req: float = 0.001,
    delay: float = 0.08,
    res: float = 0.004,
    content_length: int = 0,
) -> Result:
    """Create a successful Result with sensible defaults."""
    return Result.success(
        duration,
        status_code=status_code,
        conn=conn,
        dns=dns,
        req=req,
        delay=delay,
        res=res,
        content_length=content_length,
    )


@pytest.fixture
def success() -> Callable[..., Result]:
    """Factory fixture for successful results."""
    return make_success


@pytest.fixture
def results_file(tmp_path: Path) -> Path:
    """A recorded run with three successes and one failure."""
    records = [
        {"duration": 0.2, "conn": 0.02, "dns": 0.01, "req": 0.001, "delay": 0.15, "res": 0.01,
         "status_code": 200, "content_length": 100, "error": None},
        {"duration": 0.4, "conn": 0.03, "dns": 0.02, "req": 0.002, "delay": 0.3, "res": 0.02,
         "status_code": 200, "content_length": 100, "error": None},
        {"duration": 0.3, "conn": 0.01, "dns": 0.005, "req": 0.001, "delay": 0.25, "res": 0.01,
         "status_code": 503, "content_length": 0, "error": None},
        {"error": "dial tcp: connection refused"},
    ]
    path = tmp_path / "results.jsonl"
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n")
    return path
