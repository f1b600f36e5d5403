# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocols for call-rate limiters."""

from typing import Protocol, runtime_checkable

from ..cancellation import CancellationToken


@runtime_checkable
class LimitTokenProtocol(Protocol):
    """Permission to perform one rate-limited call."""

    @property
    def released(self) -> bool:
        """Whether the token has been handed back."""
        ...

    async def release(self) -> None:
        """Hand the token back. Calls after the first are no-ops."""
        ...


@runtime_checkable
class LimiterProtocol(Protocol):
    """
    Hands out LimitTokens according to its quota.

    The limiter owns its accounting and its synchronisation. Callers only
    acquire, release and dispose.
    """

    async def acquire(
        self,
        timeout_ms: float,
        cancellation_token: CancellationToken | None = None,
    ) -> LimitTokenProtocol:
        """
        Wait for capacity and take a token.

        Raises:
            QuotaTimeoutError: If no capacity frees up within timeout_ms
            OperationCancelledError: If the token fires while waiting
            DisposedError: If the limiter has been disposed
        """
        ...

    async def dispose(self) -> None:
        """Release limiter resources and fail pending waiters."""
        ...
