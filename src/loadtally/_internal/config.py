"""Configuration loading for LoadTally."""

from __future__ import annotations

import os
from dataclasses import dataclass

from loadtally._internal.errors import ConfigError
from loadtally._internal.types import OutputMode

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})


@dataclass(frozen=True)
class LoadTallyConfig:
    """Global LoadTally configuration.

    Attributes:
        output_mode: Default report mode when the caller does not pick one.
        queue_size: Maximum results buffered in a ``ResultStream``.
            0 means unbounded.
        log_json: Emit structured JSON logs instead of human-readable ones.
    """

    output_mode: OutputMode = OutputMode.TEXT
    queue_size: int = 0
    log_json: bool = False


def load_config() -> LoadTallyConfig:
    """Load configuration from environment variables with defaults.

    Environment variables:
        LOADTALLY_OUTPUT: Default output mode, ``csv`` or ``text``
            (default: text). Unknown values fall back to text.
        LOADTALLY_QUEUE_SIZE: Result stream bound (default: 0, unbounded).
        LOADTALLY_LOG_JSON: ``1``/``true``/``yes`` to enable JSON logs.

    Returns:
        Populated LoadTallyConfig instance.

    Raises:
        ConfigError: If an environment variable has an invalid value.
    """
    queue_size_str = os.environ.get("LOADTALLY_QUEUE_SIZE", "0")
    log_json_str = os.environ.get("LOADTALLY_LOG_JSON", "").strip().lower()

    try:
        queue_size = int(queue_size_str)
    except ValueError:
        msg = f"LOADTALLY_QUEUE_SIZE must be an integer, got: {queue_size_str!r}"
        raise ConfigError(msg) from None

    if queue_size < 0:
        msg = f"LOADTALLY_QUEUE_SIZE must be >= 0, got: {queue_size}"
        raise ConfigError(msg)

    if log_json_str in _TRUTHY:
        log_json = True
    elif log_json_str in _FALSY:
        log_json = False
    else:
        msg = f"LOADTALLY_LOG_JSON must be a boolean flag, got: {log_json_str!r}"
        raise ConfigError(msg)

    return LoadTallyConfig(
        output_mode=OutputMode.parse(os.environ.get("LOADTALLY_OUTPUT")),
        queue_size=queue_size,
        log_json=log_json,
    )
