# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base Limiter

This module provides the BaseLimiter abstract class and the LimitToken it
hands out. BaseLimiter owns the waiting discipline shared by every
implementation:

- a bounded wait (QuotaTimeoutError when it runs out)
- cooperative cancellation through a CancellationToken
- wake-ups on token release, on the next window slot and on disposal

Subclasses only implement the accounting: ``_try_acquire`` and
``_release_token``.
"""

from __future__ import annotations

import abc
import asyncio
import contextlib
import logging
import math
import uuid
from types import TracebackType

from ..cancellation import NONE_CANCELLATION_TOKEN, CancellationToken, cancel_listener
from ..exceptions import OperationCancelledError, QuotaTimeoutError
from ..lifecycle import Disposable
from .config import LimitOpts

logger = logging.getLogger(__name__)


class LimitToken:
    """
    Permission to perform one rate-limited call.

    Release it exactly once when the call ends; ``release()`` is idempotent
    so a second call is a no-op. Usable as an async context manager.
    """

    def __init__(self, limiter: BaseLimiter, token_id: str):
        self._limiter = limiter
        self._token_id = token_id
        self._released = False

    @property
    def token_id(self) -> str:
        return self._token_id

    @property
    def key(self) -> str:
        return self._limiter.key

    @property
    def released(self) -> bool:
        return self._released

    async def release(self) -> None:
        if self._released:
            logger.debug("Limit token %s already released", self._token_id)
            return
        self._released = True
        await self._limiter._release_token(self._token_id)

    async def __aenter__(self) -> LimitToken:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.release()

    def __repr__(self) -> str:
        return f"LimitToken(key={self.key!r}, id={self._token_id!r}, released={self._released})"


class BaseLimiter(Disposable, abc.ABC):
    """
    Abstract limiter handing out LimitTokens for one quota key.

    ``_try_acquire`` returns 0.0 when the token was taken, otherwise the
    number of seconds until capacity may free up (``math.inf`` when only a
    release can free it).
    """

    def __init__(self, opts: LimitOpts, key: str = "default"):
        """
        Initialize the limiter.

        Args:
            opts: The quota enforced by this limiter
            key: Quota key, used in log messages and storage keys
        """
        super().__init__()
        self._opts = opts
        self._key = key
        self._waiters: list[asyncio.Future[None]] = []

    @property
    def opts(self) -> LimitOpts:
        return self._opts

    @property
    def key(self) -> str:
        return self._key

    @property
    def waiter_count(self) -> int:
        return len(self._waiters)

    async def acquire(
        self,
        timeout_ms: float,
        cancellation_token: CancellationToken | None = None,
    ) -> LimitToken:
        """
        Wait for capacity and take a token.

        Args:
            timeout_ms: Maximum wait in milliseconds (0 = only try once)
            cancellation_token: Optional caller cancellation signal

        Returns:
            A LimitToken that must be released when the call ends

        Raises:
            QuotaTimeoutError: If no capacity frees up within timeout_ms
            OperationCancelledError: If the token fires while waiting
            DisposedError: If the limiter is or becomes disposed
        """
        self.verify_not_disposed()
        token = cancellation_token or NONE_CANCELLATION_TOKEN
        self._check_cancelled(token)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_ms / 1000.0
        token_id = uuid.uuid4().hex

        while True:
            wait = await self._try_acquire(token_id)
            if wait <= 0:
                logger.debug("Limit token granted: key=%s, id=%s", self._key, token_id)
                return LimitToken(self, token_id)

            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.debug(
                    "Limit token wait timed out: key=%s, timeout_ms=%s",
                    self._key,
                    timeout_ms,
                )
                raise QuotaTimeoutError(
                    f"Timed out after {timeout_ms} ms waiting for quota '{self._key}'",
                    timeout_ms=timeout_ms,
                    key=self._key,
                )

            await self._wait(min(wait, remaining), token)
            self.verify_not_disposed()
            self._check_cancelled(token)

    @staticmethod
    def _check_cancelled(token: CancellationToken) -> None:
        if token.is_cancellation_requested:
            token.throw_if_cancellation_requested()
            # Token signalled but did not raise
            raise OperationCancelledError()

    async def _wait(self, delay: float, token: CancellationToken) -> None:
        """Sleep up to ``delay`` seconds, returning early on any wake-up."""
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()

        def wake() -> None:
            if not waiter.done():
                waiter.set_result(None)

        self._waiters.append(waiter)
        try:
            with cancel_listener(token, wake):
                if math.isinf(delay):
                    await waiter
                else:
                    await asyncio.wait({waiter}, timeout=delay)
        finally:
            with contextlib.suppress(ValueError):
                self._waiters.remove(waiter)
            if not waiter.done():
                waiter.cancel()

    def _wake_waiters(self) -> None:
        for waiter in list(self._waiters):
            if not waiter.done():
                waiter.set_result(None)

    @abc.abstractmethod
    async def _try_acquire(self, token_id: str) -> float:
        """Take a token if capacity allows; otherwise return seconds to wait."""
        pass

    @abc.abstractmethod
    async def _release_token(self, token_id: str) -> None:
        """Return a token's parallel slot."""
        pass

    async def _on_dispose(self) -> None:
        # Pending waiters observe DISPOSING and raise DisposedError
        self._wake_waiters()


__all__ = ["BaseLimiter", "LimitToken"]
