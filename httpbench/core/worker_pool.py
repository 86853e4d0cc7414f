"""Fixed-size pool of concurrent request workers."""

import asyncio
import logging
import time
from typing import List, Tuple

from .models import WorkItem, RequestResult
from .request_executor import RequestExecutor

# Marks the end of the result stream once every worker has exited
_RESULTS_CLOSED = object()


class WorkerPool:
    """
    Runs exactly total_requests executions on exactly parallel_count workers.

    The work queue is loaded with every item before any worker starts, so a
    worker is done as soon as it finds the queue empty.
    """

    def __init__(self, executor: RequestExecutor, total_requests: int, parallel_count: int):
        if total_requests < 0:
            raise ValueError("total_requests must not be negative")
        if parallel_count < 1:
            raise ValueError("parallel_count must be at least 1")

        self.executor = executor
        self.total_requests = total_requests
        self.parallel_count = parallel_count
        self.logger = logging.getLogger(__name__)

    def _fill_work_queue(self) -> asyncio.Queue:
        work_queue: asyncio.Queue = asyncio.Queue(maxsize=self.total_requests)
        for i in range(self.total_requests):
            work_queue.put_nowait(WorkItem(test_number=i))
        return work_queue

    async def _worker(
        self,
        thread_number: int,
        work_queue: asyncio.Queue,
        results_queue: asyncio.Queue,
    ) -> None:
        """Drain the work queue, pushing one result per item."""
        while True:
            try:
                item: WorkItem = work_queue.get_nowait()
            except asyncio.QueueEmpty:
                return

            result = await self.executor.execute(item.test_number, thread_number)
            results_queue.put_nowait(result)

    async def _close_when_done(
        self, workers: List[asyncio.Task], results_queue: asyncio.Queue
    ) -> None:
        try:
            await asyncio.gather(*workers)
        except BaseException:
            # A crashed worker stops the whole pool; no task outlives run()
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise
        finally:
            results_queue.put_nowait(_RESULTS_CLOSED)

    async def run(self) -> Tuple[List[RequestResult], float]:
        """
        Execute every work item.

        Returns:
            Tuple of (results in arrival order, total duration in seconds)
        """
        work_queue = self._fill_work_queue()
        results_queue: asyncio.Queue = asyncio.Queue()

        self.logger.info(
            f"Dispatching {self.total_requests} requests across "
            f"{self.parallel_count} workers"
        )

        start_time = time.perf_counter()
        workers = [
            asyncio.create_task(self._worker(i, work_queue, results_queue))
            for i in range(self.parallel_count)
        ]
        closer = asyncio.create_task(self._close_when_done(workers, results_queue))

        results: List[RequestResult] = []
        try:
            while True:
                item = await results_queue.get()
                if item is _RESULTS_CLOSED:
                    break
                results.append(item)
        except BaseException:
            closer.cancel()
            await asyncio.gather(closer, return_exceptions=True)
            raise

        total_duration = time.perf_counter() - start_time
        # Surfaces a worker crash; per-request failures never get this far
        await closer

        self.logger.info(
            f"All workers finished: {len(results)} results in {total_duration:.2f}s"
        )
        return results, total_duration
