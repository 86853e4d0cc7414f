"""Data models for benchmarking."""

import math
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

BODY_METHODS = ("POST", "PUT", "PATCH")


@dataclass(frozen=True)
class BenchmarkConfig:
    """Fully resolved configuration for a single benchmark run."""

    url: str
    method: str = "GET"
    auth_token: Optional[str] = None

    total_requests: int = 100
    parallel_count: int = 10
    timeout_seconds: float = 30.0

    headers: Dict[str, str] = field(default_factory=dict)
    parameters: Dict[str, str] = field(default_factory=dict)

    # Request body (post_data_file is already read into post_data)
    post_data: Optional[str] = None
    post_data_file: Optional[str] = None
    content_type: str = "application/json"

    dump_failures_dir: Optional[str] = None

    @property
    def has_body(self) -> bool:
        """Check if requests for this config carry a body."""
        return self.method in BODY_METHODS and bool(self.post_data)


@dataclass(frozen=True)
class WorkItem:
    """A single unit of benchmark work."""

    test_number: int


@dataclass(frozen=True)
class RequestResult:
    """Outcome of one executed work item."""

    success: bool
    response_time_ms: float
    status_code: int = 0
    error: Optional[str] = None
    response_body: Optional[str] = field(default=None, repr=False)

    test_number: Optional[int] = None
    thread_number: Optional[int] = None


@dataclass(frozen=True)
class BenchmarkResult:
    """Aggregate results from a single benchmark run."""

    # Request metrics
    total_requests: int
    successful_requests: int
    failed_requests: int

    # Timing metrics
    total_duration_seconds: float
    requests_per_second: float

    # Latency metrics (milliseconds)
    avg_response_time_ms: float
    min_response_time_ms: float
    max_response_time_ms: float

    response_times_ms: List[float] = field(default_factory=list, repr=False)
    percentiles: Dict[int, float] = field(default_factory=dict)

    @property
    def has_measurements(self) -> bool:
        """False when no request was measured (min is left above max)."""
        return self.min_response_time_ms <= self.max_response_time_ms

    @property
    def success_rate(self) -> float:
        """Percentage of successful requests."""
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests * 100

    @property
    def error_rate(self) -> float:
        """Percentage of failed requests."""
        if self.total_requests == 0:
            return 0.0
        return self.failed_requests / self.total_requests * 100

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        measured = self.has_measurements
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "success_rate": self.success_rate,
            "total_duration_seconds": self.total_duration_seconds,
            "requests_per_second": (
                self.requests_per_second
                if math.isfinite(self.requests_per_second)
                else None
            ),
            "avg_response_time_ms": self.avg_response_time_ms,
            "min_response_time_ms": self.min_response_time_ms if measured else None,
            "max_response_time_ms": self.max_response_time_ms if measured else None,
            "p50_response_time_ms": self.percentiles.get(50),
            "p95_response_time_ms": self.percentiles.get(95),
            "p99_response_time_ms": self.percentiles.get(99),
        }
