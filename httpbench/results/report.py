"""Human-readable rendering and export of benchmark runs."""

import json
import math
from pathlib import Path
from typing import Optional

from ..core.models import BenchmarkConfig, BenchmarkResult
from .aggregator import ResultAggregator


def format_rate(value: float) -> str:
    if math.isinf(value):
        return "inf"
    return f"{value:.2f}"


def print_config(config: BenchmarkConfig) -> None:
    """Print the resolved configuration before a run."""
    print("Starting HTTP benchmark...")
    print(f"URL:               {config.url}")
    print(f"Method:            {config.method}")
    print(f"Total requests:    {config.total_requests}")
    print(f"Parallel requests: {config.parallel_count}")
    print(f"Timeout:           {config.timeout_seconds:g}s")

    if config.auth_token:
        print("Auth token:        [PROVIDED]")

    if config.headers:
        print(f"Custom headers:    {len(config.headers)}")
        for key, value in config.headers.items():
            print(f"  {key}: {value}")

    if config.parameters:
        print(f"Query parameters:  {len(config.parameters)}")
        for key, value in config.parameters.items():
            print(f"  {key}={value}")

    if config.post_data or config.post_data_file:
        print("POST data:         [PROVIDED]")
        if config.post_data_file:
            print(f"POST data file:    {config.post_data_file}")
        print(f"Content-Type:      {config.content_type}")

    if config.dump_failures_dir:
        print(f"Failure dump dir:  {config.dump_failures_dir}")


def print_results(result: BenchmarkResult) -> None:
    """Print benchmark results in a formatted way."""
    print("\n" + "=" * 60)
    print("BENCHMARK RESULTS")
    print("=" * 60)
    print(f"Total Requests:      {result.total_requests}")
    print(f"Successful Requests: {result.successful_requests}")
    print(f"Failed Requests:     {result.failed_requests}")
    print(f"Success Rate:        {result.success_rate:.2f}%")
    print()
    print("THROUGHPUT")
    print("-" * 30)
    print(f"Total Time:          {result.total_duration_seconds:.3f}s")
    print(f"Requests/Second:     {format_rate(result.requests_per_second)}")
    print()
    print("RESPONSE TIMES (ms)")
    print("-" * 30)

    if not result.has_measurements:
        print("No requests were measured.")
        print("=" * 60)
        return

    print(f"Average:             {result.avg_response_time_ms:.2f}")
    print(f"Minimum:             {result.min_response_time_ms:.2f}")
    print(f"Maximum:             {result.max_response_time_ms:.2f}")
    for p, value in sorted(result.percentiles.items()):
        print(f"{f'{p}th Percentile:':<21}{value:.2f}")
    print("=" * 60)


def export_results(
    result: BenchmarkResult,
    path: str,
    aggregator: Optional[ResultAggregator] = None,
) -> str:
    """
    Write results to a file chosen by extension.

    .json writes the aggregate summary; .csv and .tsv write one row per
    request and need the aggregator holding the raw results.
    """
    suffix = Path(path).suffix.lower()

    if suffix == ".json":
        with open(path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2)
    elif suffix in (".csv", ".tsv"):
        if aggregator is None:
            raise ValueError(f"Per-request export to {path} needs the raw results")
        if suffix == ".csv":
            aggregator.to_csv(path)
        else:
            aggregator.to_tsv(path)
    else:
        raise ValueError(f"Unsupported output format '{suffix}' (use .json, .csv or .tsv)")

    return path
