"""Custom exception hierarchy for LoadTally."""

from __future__ import annotations


class LoadTallyError(Exception):
    """Base exception for all LoadTally errors.

    All custom exceptions in LoadTally inherit from this class, making it
    easy to catch any LoadTally-specific error with a single except clause.
    """


class ConfigError(LoadTallyError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Required environment variable has an invalid value.
        - Configuration value is out of acceptable range.
    """


class StreamClosedError(LoadTallyError):
    """Raised when a result is put on a stream that was already closed."""


class AggregationError(LoadTallyError):
    """Raised when a finalized aggregator is asked to accumulate again.

    A ``Report`` is populated by exactly one drain pass. Recording into
    or draining an aggregator after ``finalize()`` is a usage error.
    """


class ResultFileError(LoadTallyError):
    """Raised when a recorded result file cannot be read or parsed.

    Examples:
        - A line is not valid JSON.
        - A success record is missing a duration field.
    """
