"""Chart generation for benchmark results."""

import logging
from datetime import datetime
from typing import Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from ..core.models import BenchmarkResult  # noqa: E402

logger = logging.getLogger(__name__)

PERCENTILE_COLORS = {50: "g", 95: "orange", 99: "r"}


def generate_latency_chart(
    result: BenchmarkResult,
    output_path: Optional[str] = None,
) -> Optional[str]:
    """
    Generate latency charts for a single run.

    Args:
        result: Benchmark result to plot
        output_path: Path to save the chart (auto-generated if None)

    Returns:
        Path to saved chart file, or None if there was nothing to plot
    """
    if not result.has_measurements:
        logger.info("No response times to chart.")
        return None

    latencies = result.response_times_ms

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(15, 6))
    fig.suptitle("Benchmark Response Times", fontsize=16, fontweight="bold")

    # Latency distribution
    ax1.hist(latencies, bins=min(50, max(10, len(latencies) // 10)), color="b", alpha=0.6)
    for p, value in sorted(result.percentiles.items()):
        ax1.axvline(
            value,
            color=PERCENTILE_COLORS.get(p, "k"),
            linestyle="--",
            linewidth=2,
            label=f"p{p} ({value:.1f}ms)",
        )
    ax1.set_xlabel("Response Time (ms)")
    ax1.set_ylabel("Requests")
    ax1.set_title("Response Time Distribution")
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    # Latency in completion order
    ax2.plot(range(1, len(latencies) + 1), latencies, "b-", linewidth=1, alpha=0.7)
    ax2.axhline(
        result.avg_response_time_ms,
        color="g",
        linewidth=2,
        label=f"Average ({result.avg_response_time_ms:.1f}ms)",
    )
    ax2.set_xlabel("Completed Request")
    ax2.set_ylabel("Response Time (ms)")
    ax2.set_title("Response Time by Completion Order")
    ax2.legend()
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        saved_path = output_path
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        saved_path = f"benchmark_latency_{timestamp}.png"

    plt.savefig(saved_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"Chart saved as: {saved_path}")

    return saved_path
