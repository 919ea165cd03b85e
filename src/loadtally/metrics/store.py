"""JSON Lines persistence for recorded results.

Each line holds one result::

    {"duration": 0.12, "conn": 0.01, "dns": 0.004, "req": 0.0002,
     "delay": 0.1, "res": 0.005, "status_code": 200,
     "content_length": 512, "error": null}

Failures only need ``error``; every other key is ignored for them.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from loadtally._internal.errors import ResultFileError
from loadtally._internal.logging import get_logger
from loadtally.metrics.models import Result

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from loadtally.metrics.stream import ResultStream

logger = get_logger("metrics.store")

_PHASE_KEYS = ("conn", "dns", "req", "delay", "res")


def result_to_dict(result: Result) -> dict[str, Any]:
    """Convert a result to its JSON-serializable record."""
    if not result.is_success:
        return {"error": str(result.error)}
    return {
        "duration": result.duration,
        "conn": result.conn_duration,
        "dns": result.dns_duration,
        "req": result.req_duration,
        "delay": result.delay_duration,
        "res": result.res_duration,
        "status_code": result.status_code,
        "content_length": result.content_length,
        "error": None,
    }


def result_from_dict(record: dict[str, Any]) -> Result:
    """Build a result from a decoded record.

    Raises:
        KeyError: If a success record has no ``duration`` or ``status_code``.
        TypeError: If a field has a non-numeric value.
        ValueError: If a field cannot be converted to a number.
    """
    error = record.get("error")
    if error is not None:
        return Result.failure(str(error))
    phases = {key: float(record.get(key, 0.0)) for key in _PHASE_KEYS}
    return Result.success(
        float(record["duration"]),
        status_code=int(record["status_code"]),
        content_length=int(record.get("content_length", 0)),
        **phases,
    )


def load_results(path: Path) -> list[Result]:
    """Read every result from a JSON Lines file.

    Blank lines are skipped.

    Args:
        path: File to read.

    Returns:
        Results in file order.

    Raises:
        ResultFileError: If the file cannot be read or a line is malformed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read result file {path}: {exc}"
        raise ResultFileError(msg) from exc

    results: list[Result] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
            if not isinstance(record, dict):
                msg = f"expected an object, got {type(record).__name__}"
                raise TypeError(msg)
            results.append(result_from_dict(record))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            msg = f"{path}:{lineno}: invalid result record ({exc})"
            raise ResultFileError(msg) from exc

    logger.debug("Loaded %d results from %s", len(results), path)
    return results


def dump_results(results: Iterable[Result], path: Path) -> int:
    """Write results to a JSON Lines file, replacing its contents.

    Args:
        results: Results to write.
        path: Destination file.

    Returns:
        Number of records written.
    """
    count = 0
    with path.open("w", encoding="utf-8") as fh:
        for result in results:
            fh.write(json.dumps(result_to_dict(result)))
            fh.write("\n")
            count += 1
    return count


async def feed_stream(results: Iterable[Result], stream: ResultStream) -> None:
    """Put every result on ``stream`` and close it.

    Acts as the producer side when replaying a recorded run.
    """
    try:
        for result in results:
            await stream.put(result)
    finally:
        stream.close()
