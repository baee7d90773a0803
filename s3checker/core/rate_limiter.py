"""Shared start-slot rate limiter."""

import asyncio
import time
from typing import Callable, Optional


class RateLimiter:
    """Hands out probe start slots spaced ``1 / rate`` seconds apart.

    All workers share one instance. Each acquire() reserves the next free
    slot under a lock and then sleeps outside the lock until that slot,
    so no more than ``rate`` probes start in any one-second window.
    """

    def __init__(
        self,
        rate_per_second: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], "asyncio.Future"] = asyncio.sleep,
    ):
        """
        Initialize the rate limiter.

        Args:
            rate_per_second: Maximum probe starts per second (> 0)
            clock: Monotonic clock, replaceable in tests
            sleep: Async sleep, replaceable in tests
        """
        if rate_per_second <= 0:
            raise ValueError("rate_per_second must be positive")

        self.rate_per_second = rate_per_second
        self.interval = 1.0 / rate_per_second
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._next_slot: Optional[float] = None

    async def acquire(self) -> float:
        """Wait for the next token; returns the slot time it was granted."""
        async with self._lock:
            now = self._clock()
            slot = now if self._next_slot is None else max(now, self._next_slot)
            self._next_slot = slot + self.interval

        delay = slot - self._clock()
        if delay > 0:
            await self._sleep(delay)

        return slot

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    def __repr__(self) -> str:
        return f"<RateLimiter rate={self.rate_per_second}/s>"
