"""Result and report dataclasses for LoadTally."""

from __future__ import annotations

from dataclasses import dataclass, field

from loadtally._internal.types import ErrorDist, OutputMode, StatusCodeDist

__all__ = [
    "HistogramBucket",
    "PhaseStats",
    "Report",
    "Result",
]


@dataclass(frozen=True)
class Result:
    """Outcome of one issued request.

    A result is either a success (``error is None``) carrying the total
    duration, the five phase durations, the status code and the content
    length, or a failure carrying only an opaque error descriptor. All
    durations are in seconds.

    Attributes:
        duration: Total request duration.
        conn_duration: Connection setup time, including DNS (DNS+dialup).
        dns_duration: DNS resolution time.
        req_duration: Time spent writing the request.
        delay_duration: Time waiting for the first response byte.
        res_duration: Time spent reading the response.
        status_code: HTTP response status code (0 for failures).
        content_length: Response body size in bytes, -1 if unknown.
        error: Error descriptor for failed requests, None otherwise. Only
            its ``str()`` is ever used.
    """

    duration: float = 0.0
    conn_duration: float = 0.0
    dns_duration: float = 0.0
    req_duration: float = 0.0
    delay_duration: float = 0.0
    res_duration: float = 0.0
    status_code: int = 0
    content_length: int = 0
    error: object | None = None

    @classmethod
    def success(
        cls,
        duration: float,
        *,
        status_code: int,
        conn: float = 0.0,
        dns: float = 0.0,
        req: float = 0.0,
        delay: float = 0.0,
        res: float = 0.0,
        content_length: int = 0,
    ) -> Result:
        """Build a successful result."""
        return cls(
            duration=duration,
            conn_duration=conn,
            dns_duration=dns,
            req_duration=req,
            delay_duration=delay,
            res_duration=res,
            status_code=status_code,
            content_length=content_length,
        )

    @classmethod
    def failure(cls, error: object) -> Result:
        """Build a failed result from an exception or message."""
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        """Return True if the request completed without an error."""
        return self.error is None


@dataclass
class Report:
    """Aggregation state and derived statistics for one run.

    Sequences hold durations in seconds in arrival order. They are never
    sorted in place; statistics work on sorted copies.

    Attributes:
        total_seconds: Wall-clock duration of the whole run.
        output_mode: How the report is rendered.
        lats: Total duration of every successful request.
        conn_lats: DNS+dialup duration of every successful request.
        dns_lats: DNS lookup duration of every successful request.
        req_lats: Request write duration of every successful request.
        delay_lats: Response wait duration of every successful request.
        res_lats: Response read duration of every successful request.
        total_sum: Running sum of ``lats``.
        conn_sum: Running sum of ``conn_lats``.
        dns_sum: Running sum of ``dns_lats``.
        req_sum: Running sum of ``req_lats``.
        delay_sum: Running sum of ``delay_lats``.
        res_sum: Running sum of ``res_lats``.
        status_code_dist: Response count per HTTP status code.
        error_dist: Failure count per error message.
        size_total: Bytes received across all successful requests.
        rps: Successful requests per second over ``total_seconds``.
        average: Mean total duration.
        avg_conn: Mean DNS+dialup duration.
        avg_dns: Mean DNS lookup duration.
        avg_req: Mean request write duration.
        avg_delay: Mean response wait duration.
        avg_res: Mean response read duration.
    """

    total_seconds: float
    output_mode: OutputMode = OutputMode.TEXT

    lats: list[float] = field(default_factory=list)
    conn_lats: list[float] = field(default_factory=list)
    dns_lats: list[float] = field(default_factory=list)
    req_lats: list[float] = field(default_factory=list)
    delay_lats: list[float] = field(default_factory=list)
    res_lats: list[float] = field(default_factory=list)

    total_sum: float = 0.0
    conn_sum: float = 0.0
    dns_sum: float = 0.0
    req_sum: float = 0.0
    delay_sum: float = 0.0
    res_sum: float = 0.0

    status_code_dist: StatusCodeDist = field(default_factory=dict)
    error_dist: ErrorDist = field(default_factory=dict)
    size_total: int = 0

    rps: float = 0.0
    average: float = 0.0
    avg_conn: float = 0.0
    avg_dns: float = 0.0
    avg_req: float = 0.0
    avg_delay: float = 0.0
    avg_res: float = 0.0

    @property
    def success_count(self) -> int:
        """Return the number of successful results."""
        return len(self.lats)

    @property
    def error_count(self) -> int:
        """Return the number of failed results."""
        return sum(self.error_dist.values())

    @property
    def total_count(self) -> int:
        """Return the number of consumed results."""
        return self.success_count + self.error_count


@dataclass(frozen=True)
class HistogramBucket:
    """One row of the response time histogram.

    Attributes:
        edge: Upper edge of the bucket in seconds (inclusive).
        count: Number of samples in the bucket.
        bar_length: Bar width normalized so the fullest bucket is 40.
    """

    edge: float
    count: int
    bar_length: int


@dataclass(frozen=True)
class PhaseStats:
    """Average, fastest and slowest duration of one request phase."""

    label: str
    average: float
    fastest: float
    slowest: float
