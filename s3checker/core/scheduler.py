"""Bounded-concurrency scan scheduler."""

import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Dict, Iterable, List, Optional

from loguru import logger

from s3checker.core.error_handler import error_handler
from s3checker.core.rate_limiter import RateLimiter
from s3checker.scanners.base import ProbeResult
from s3checker.scanners.bucket_prober import ProbeClassifier


@dataclass
class ScanProgress:
    """Completed-probe counter for one scan; only ever increases."""

    total: int = 0
    completed: int = 0

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 100.0
        return round(self.completed / self.total * 100, 2)


class ScanScheduler:
    """Run the probe classifier over a candidate set with a fixed worker pool."""

    def __init__(
        self,
        classifier: ProbeClassifier,
        concurrency: int = 50,
        rate_per_second: float = 0,
        progress_callback: Optional[Callable[[ProbeResult, ScanProgress], Any]] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            classifier: Probe classifier invoked once per candidate
            concurrency: Number of worker tasks
            rate_per_second: Maximum probe starts per second (0 for unlimited)
            progress_callback: Called after every probe with the result and
                the progress counter; may be a coroutine function
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        if rate_per_second < 0:
            raise ValueError("rate_per_second cannot be negative")

        self.classifier = classifier
        self.concurrency = concurrency
        self.rate_per_second = rate_per_second
        self.rate_limiter = RateLimiter(rate_per_second) if rate_per_second > 0 else None
        self.progress_callback = progress_callback
        self.progress = ScanProgress()
        self._started = False

        # Statistics
        self.stats = {
            "duplicates": 0,
            "exists": 0,
            "unreachable": 0,
            "errors": 0,
        }

        logger.info(
            f"Initialized ScanScheduler with concurrency={concurrency}, "
            f"rate_limit={rate_per_second or 'none'}"
        )

    async def run(self, candidates: Iterable[str]) -> AsyncIterator[ProbeResult]:
        """
        Probe every candidate exactly once and yield results as they finish.

        Results come out in completion order, not input order. A scheduler
        runs once; calling run() again raises RuntimeError.

        Args:
            candidates: Candidate bucket names

        Yields:
            One ProbeResult per unique candidate

        Example:
            >>> scheduler = ScanScheduler(classifier, concurrency=10)
            >>> async for result in scheduler.run(("acme", "acme-dev")):
            ...     print(result.candidate, result.status_code)
        """
        if self._started:
            raise RuntimeError("ScanScheduler.run() can only be called once")
        self._started = True

        queue: asyncio.Queue = asyncio.Queue()
        seen = set()
        for candidate in candidates:
            if candidate in seen:
                self.stats["duplicates"] += 1
                continue
            seen.add(candidate)
            queue.put_nowait(candidate)

        total = queue.qsize()
        self.progress = ScanProgress(total=total)

        if total == 0:
            logger.info("No candidates to scan")
            return

        logger.info(f"Starting scan of {total} candidates")

        results: asyncio.Queue = asyncio.Queue()
        workers: List[asyncio.Task] = [
            asyncio.create_task(self._worker(queue, results))
            for _ in range(min(self.concurrency, total))
        ]

        try:
            for _ in range(total):
                yield await results.get()
            await asyncio.gather(*workers)
        finally:
            for worker in workers:
                if not worker.done():
                    worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        logger.info(
            f"Scan completed: {self.progress.completed} probed, "
            f"{self.stats['exists']} exist, {self.stats['unreachable']} unreachable"
        )

    async def _worker(self, queue: asyncio.Queue, results: asyncio.Queue) -> None:
        """Take candidates until the queue is empty."""
        while True:
            try:
                candidate = queue.get_nowait()
            except asyncio.QueueEmpty:
                return

            if self.rate_limiter:
                async with self.rate_limiter:
                    result = await self._probe(candidate)
            else:
                result = await self._probe(candidate)

            self.progress.completed += 1
            if result.exists:
                self.stats["exists"] += 1
            elif result.transport_failed:
                self.stats["unreachable"] += 1

            results.put_nowait(result)
            queue.task_done()

            if self.progress_callback:
                try:
                    outcome = self.progress_callback(result, self.progress)
                    if asyncio.iscoroutine(outcome):
                        await outcome
                except Exception as e:
                    logger.error(f"Progress callback failed: {error_handler.describe(e)}")

    async def _probe(self, candidate: str) -> ProbeResult:
        """Classify one candidate; an unexpected error still yields a result."""
        try:
            return await self.classifier.classify(candidate)
        except Exception as e:
            self.stats["errors"] += 1
            logger.error(f"Error probing {candidate}: {error_handler.describe(e)}")
            return ProbeResult.absent(candidate)

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get scan statistics.

        Returns:
            Dictionary with progress counters and per-outcome totals
        """
        return {
            **self.stats,
            "total": self.progress.total,
            "completed": self.progress.completed,
            "completion_rate": self.progress.percent,
        }
