# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Limiter configuration.

LimitOpts describes the quota itself; LimitConfig adds how long a caller
is willing to wait for it.
"""

from dataclasses import dataclass

SECOND = 1.0
MINUTE = 60.0
HOUR = 3600.0


@dataclass(frozen=True)
class LimitOpts:
    """
    Call-rate quota.

    Any field may be None (unlimited) but at least one must be set.

    Attributes:
        per_second: Maximum acquisitions in any sliding 1 second window
        per_minute: Maximum acquisitions in any sliding 60 second window
        per_hour: Maximum acquisitions in any sliding 3600 second window
        parallel: Maximum tokens held at the same time
    """

    per_second: int | None = None
    per_minute: int | None = None
    per_hour: int | None = None
    parallel: int | None = None

    def __post_init__(self) -> None:
        values = (self.per_second, self.per_minute, self.per_hour, self.parallel)
        if all(v is None for v in values):
            raise ValueError("LimitOpts requires at least one limit")
        for name in ("per_second", "per_minute", "per_hour", "parallel"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ValueError(f"{name} must be at least 1")

    @property
    def windows(self) -> tuple[tuple[float, int], ...]:
        """Configured (window_seconds, limit) pairs, shortest window first."""
        pairs = (
            (SECOND, self.per_second),
            (MINUTE, self.per_minute),
            (HOUR, self.per_hour),
        )
        return tuple((w, n) for w, n in pairs if n is not None)

    @property
    def longest_window(self) -> float:
        windows = self.windows
        return windows[-1][0] if windows else 0.0


@dataclass(frozen=True)
class LimitConfig:
    """
    Limiter settings for WebApiClient.

    Attributes:
        opts: The quota
        timeout_ms: Maximum time a call waits for a token, in milliseconds
        key: Quota key; calls sharing a key share the quota
    """

    opts: LimitOpts
    timeout_ms: float
    key: str = "default"

    def __post_init__(self) -> None:
        if self.timeout_ms < 0:
            raise ValueError("timeout_ms must not be negative")
        if not self.key:
            raise ValueError("key must not be empty")


__all__ = ["HOUR", "MINUTE", "SECOND", "LimitConfig", "LimitOpts"]
