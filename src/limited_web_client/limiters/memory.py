# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
MemoryLimiter

In-process limiter with sliding-window accounting. Perfect for
single-process applications and tests; use RedisLimiter when several
processes share one quota.
"""

import bisect
import logging
import math
import time

from .base import BaseLimiter
from .config import LimitOpts

logger = logging.getLogger(__name__)


class MemoryLimiter(BaseLimiter):
    """
    An in-memory limiter.

    Acquisition timestamps are kept in ascending order and pruned to the
    longest configured window. A token counts against every window from
    the moment it is granted; releasing it only frees its parallel slot.

    Example:
        >>> limiter = MemoryLimiter(LimitOpts(per_second=2, parallel=1))
        >>> token = await limiter.acquire(timeout_ms=1000)
        >>> try:
        ...     await do_call()
        ... finally:
        ...     await token.release()
    """

    def __init__(self, opts: LimitOpts, key: str = "default", clock=time.monotonic):
        """
        Initialize the in-memory limiter.

        Args:
            opts: The quota to enforce
            key: Quota key for log messages
            clock: Monotonic time source in seconds (injectable for tests)
        """
        super().__init__(opts, key)
        self._clock = clock
        self._acquisitions: list[float] = []
        self._active: set[str] = set()

    @property
    def active_count(self) -> int:
        """Number of tokens currently held."""
        return len(self._active)

    def _prune(self, now: float) -> None:
        longest = self._opts.longest_window
        if not longest:
            self._acquisitions.clear()
            return
        cutoff = bisect.bisect_right(self._acquisitions, now - longest)
        if cutoff:
            del self._acquisitions[:cutoff]

    def _compute_wait(self, now: float) -> float:
        """Seconds until a token can be granted; 0.0 when it can be now."""
        parallel = self._opts.parallel
        if parallel is not None and len(self._active) >= parallel:
            return math.inf

        wait = 0.0
        for window, limit in self._opts.windows:
            start = bisect.bisect_right(self._acquisitions, now - window)
            count = len(self._acquisitions) - start
            if count >= limit:
                # The slot frees when enough in-window acquisitions age out
                oldest_blocking = self._acquisitions[start + count - limit]
                wait = max(wait, oldest_blocking + window - now)
        return wait

    async def _try_acquire(self, token_id: str) -> float:
        now = self._clock()
        self._prune(now)
        wait = self._compute_wait(now)
        if wait > 0:
            return wait
        self._acquisitions.append(now)
        self._active.add(token_id)
        return 0.0

    async def _release_token(self, token_id: str) -> None:
        if token_id in self._active:
            self._active.discard(token_id)
            self._wake_waiters()
        else:
            logger.debug("Release of unknown limit token %s ignored", token_id)

    async def _on_dispose(self) -> None:
        await super()._on_dispose()
        self._active.clear()
        self._acquisitions.clear()


__all__ = ["MemoryLimiter"]
