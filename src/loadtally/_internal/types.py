"""Shared type aliases for LoadTally."""

from __future__ import annotations

from enum import Enum

# HTTP status code -> number of responses.
StatusCodeDist = dict[int, int]

# Error display string -> number of occurrences.
ErrorDist = dict[str, int]


class OutputMode(Enum):
    """Report rendering mode."""

    TEXT = "text"
    CSV = "csv"

    @classmethod
    def parse(cls, value: str | OutputMode | None) -> OutputMode:
        """Resolve a user-supplied selector, falling back to ``TEXT``.

        Only ``"csv"`` (case-insensitive) selects CSV output. Anything
        else, including ``None`` and unknown strings, selects the text
        summary.
        """
        if isinstance(value, OutputMode):
            return value
        if value is not None and value.strip().lower() == cls.CSV.value:
            return cls.CSV
        return cls.TEXT
