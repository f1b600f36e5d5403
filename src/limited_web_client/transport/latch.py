# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Single-assignment resolution latch."""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

T = TypeVar("T")


class ResolutionLatch(Generic[T]):
    """
    A one-shot outcome slot written by racing completion sources.

    The first call to ``resolve`` or ``reject`` wins and returns True.
    Every later call is a no-op returning False. ``wait()`` returns the
    value or raises the error of the winning write.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._future: asyncio.Future[T] = (
            loop or asyncio.get_running_loop()
        ).create_future()

    @property
    def is_resolved(self) -> bool:
        return self._future.done()

    def resolve(self, value: T) -> bool:
        if self._future.done():
            return False
        self._future.set_result(value)
        return True

    def reject(self, error: BaseException) -> bool:
        if self._future.done():
            return False
        self._future.set_exception(error)
        return True

    async def wait(self) -> T:
        # shield: cancelling the waiter must not consume the outcome slot
        return await asyncio.shield(self._future)

    def discard(self) -> None:
        """Mark an unobserved rejection as retrieved so asyncio does not log it."""
        if self._future.done() and not self._future.cancelled():
            self._future.exception()


__all__ = ["ResolutionLatch"]
