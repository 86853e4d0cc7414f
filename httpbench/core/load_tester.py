"""Core load testing functionality."""

import logging
from typing import List, Optional

import aiohttp

from .failure_sampler import FailureSampler
from .models import BenchmarkConfig, BenchmarkResult, RequestResult
from .request_executor import RequestExecutor
from .worker_pool import WorkerPool
from ..results.aggregator import ResultAggregator


class LoadTester:
    """
    Runs one benchmark against the configured URL.

    Every run gets its own HTTP session and failure sampler; both are shared by
    all workers of that run and discarded when it ends.
    """

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self.aggregator = ResultAggregator()
        self.failure_sampler: Optional[FailureSampler] = None
        self.logger = logging.getLogger(__name__)

    @property
    def results(self) -> List[RequestResult]:
        return self.aggregator.results

    async def run(self) -> BenchmarkResult:
        """Run the benchmark and return aggregate statistics."""
        self.aggregator.clear()
        self.failure_sampler = FailureSampler(self.config.dump_failures_dir)

        timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
        connector = aiohttp.TCPConnector(
            limit=self.config.parallel_count,
            limit_per_host=self.config.parallel_count,
        )

        self.logger.info("Starting HTTP benchmark:")
        self.logger.info(f"  {self.config.method} {self.config.url}")
        self.logger.info(
            f"  {self.config.total_requests} requests, "
            f"{self.config.parallel_count} parallel"
        )

        async with aiohttp.ClientSession(
            timeout=timeout, connector=connector
        ) as session:
            executor = RequestExecutor(self.config, session, self.failure_sampler)
            pool = WorkerPool(
                executor,
                total_requests=self.config.total_requests,
                parallel_count=self.config.parallel_count,
            )
            results, total_duration = await pool.run()

        self.aggregator.add_results(results)

        if self.failure_sampler.enabled:
            self.logger.info(self.failure_sampler.summary())

        return self.aggregator.calculate(total_duration)
