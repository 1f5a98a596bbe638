"""Minimum-interval rate limiter for outbound provider calls."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL_SECONDS = 1.0


class RateLimiter:
    """Enforces a minimum spacing between granted turns.

    Waiters are served in arrival order (asyncio.Lock is FIFO) and wait
    by suspending, never by spinning.

    Args:
        min_interval: Minimum seconds between two granted turns.
        clock: Monotonic clock returning seconds.
        sleep: Coroutine used to suspend.
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_MIN_INTERVAL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_granted: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    @property
    def last_granted(self) -> float | None:
        """Clock reading of the most recent granted turn (None before the first)."""
        return self._last_granted

    async def acquire(self) -> None:
        """Wait for the next turn and record it."""
        async with self._lock:
            if self._last_granted is not None:
                wait = self._min_interval - (self._clock() - self._last_granted)
                if wait > 0:
                    logger.debug("Rate limiter waiting %.3fs", wait)
                    await self._sleep(wait)
            self._last_granted = self._clock()
