"""Core benchmarking components."""

# LoadTester is imported from .load_tester directly since it depends on ..results

from .models import BenchmarkConfig, BenchmarkResult, RequestResult, WorkItem
from .config_loader import ConfigError, resolve_config
from .failure_sampler import FailureSampler
from .request_executor import RequestExecutor
from .worker_pool import WorkerPool

__all__ = [
    "BenchmarkConfig",
    "BenchmarkResult",
    "RequestResult",
    "WorkItem",
    "ConfigError",
    "resolve_config",
    "FailureSampler",
    "RequestExecutor",
    "WorkerPool",
]
