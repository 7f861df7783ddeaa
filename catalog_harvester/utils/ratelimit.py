from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Awaitable, Callable

from ..errors import RateLimitExceeded

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window request quota followed by a randomized pause.

    ``consume()`` hands out at most ``points`` permits per ``duration`` seconds
    and raises RateLimitExceeded instead of waiting when none is left.
    ``acquire()`` takes a permit and then sleeps for a delay drawn uniformly
    from ``[duration, max_delay]`` so consecutive requests are spaced by at
    least one window.
    """

    def __init__(
        self,
        points: int = 1,
        duration: float = 2.0,
        max_delay: float = 6.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        uniform: Callable[[float, float], float] = random.uniform,
    ) -> None:
        if points < 1:
            raise ValueError("points must be >= 1")
        if duration <= 0:
            raise ValueError("duration must be > 0")
        if max_delay < duration:
            raise ValueError("max_delay must be >= duration")
        self.points = points
        self.duration = duration
        self.max_delay = max_delay
        self._clock = clock
        self._sleep = sleep
        self._uniform = uniform
        self._window_start: float | None = None
        self._used = 0

    def consume(self) -> None:
        now = self._clock()
        if self._window_start is None or now - self._window_start >= self.duration:
            self._window_start = now
            self._used = 0
        if self._used >= self.points:
            retry_after = self.duration - (now - self._window_start)
            raise RateLimitExceeded(retry_after)
        self._used += 1

    async def acquire(self) -> float:
        self.consume()
        delay = self._uniform(self.duration, self.max_delay)
        logger.info("Waiting %.2f seconds", delay)
        await self._sleep(delay)
        return delay
