"""Result aggregation and export."""

import math
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from ..core.models import BenchmarkResult, RequestResult

PERCENTILES = (50, 95, 99)


def calculate_percentiles(
    response_times: Sequence[float], percentiles: Iterable[int] = PERCENTILES
) -> Dict[int, float]:
    """
    Nearest-rank percentiles without interpolation.

    The value for p is sorted_times[count * p // 100]. An empty input yields
    an empty mapping.
    """
    if not response_times:
        return {}
    sorted_times = sorted(response_times)
    count = len(sorted_times)
    return {p: sorted_times[min(count * p // 100, count - 1)] for p in percentiles}


def calculate_requests_per_second(count: int, duration_seconds: float) -> float:
    """Throughput, with a zero duration mapped to inf (or 0.0 for no requests)."""
    if duration_seconds <= 0:
        return math.inf if count > 0 else 0.0
    return count / duration_seconds


class ResultAggregator:
    """Collects request results and turns them into a BenchmarkResult."""

    def __init__(self):
        self.results: List[RequestResult] = []

    def add_result(self, result: RequestResult) -> None:
        """Add a single request result."""
        self.results.append(result)

    def add_results(self, results: Iterable[RequestResult]) -> None:
        """Add multiple request results."""
        self.results.extend(results)

    def clear(self) -> None:
        """Clear all results."""
        self.results = []

    def calculate(self, total_duration_seconds: float) -> BenchmarkResult:
        """
        Compute aggregate statistics for the collected results.

        With no results the minimum stays at inf and the maximum at 0.0, so
        BenchmarkResult.has_measurements reports False.
        """
        successful = 0
        failed = 0
        total_time = 0.0
        min_time = math.inf
        max_time = 0.0
        response_times: List[float] = []

        for result in self.results:
            if result.success:
                successful += 1
            else:
                failed += 1

            response_times.append(result.response_time_ms)
            total_time += result.response_time_ms

            if result.response_time_ms < min_time:
                min_time = result.response_time_ms
            if result.response_time_ms > max_time:
                max_time = result.response_time_ms

        count = len(self.results)
        avg_time = total_time / count if count else 0.0

        return BenchmarkResult(
            total_requests=count,
            successful_requests=successful,
            failed_requests=failed,
            total_duration_seconds=total_duration_seconds,
            requests_per_second=calculate_requests_per_second(
                count, total_duration_seconds
            ),
            avg_response_time_ms=avg_time,
            min_response_time_ms=min_time,
            max_response_time_ms=max_time,
            response_times_ms=response_times,
            percentiles=calculate_percentiles(response_times),
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Convert request results to a pandas DataFrame, one row per request."""
        data = []
        for result in self.results:
            data.append({
                "Test": result.test_number,
                "Thread": result.thread_number,
                "Success": result.success,
                "Status": result.status_code,
                "Latency_ms": round(result.response_time_ms, 3),
                "Error": result.error or "",
            })
        return pd.DataFrame(
            data, columns=["Test", "Thread", "Success", "Status", "Latency_ms", "Error"]
        )

    def to_csv(self, path: str) -> None:
        """Export to CSV file."""
        df = self.to_dataframe()
        df.to_csv(path, index=False)

    def to_tsv(self, path: str) -> None:
        """Export to TSV file."""
        df = self.to_dataframe()
        df.to_csv(path, sep="\t", index=False)
