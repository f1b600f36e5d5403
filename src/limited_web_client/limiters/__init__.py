# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Limiter implementations for call-rate quotas.

Available limiters:
- BaseLimiter: Abstract base class owning the bounded, cancellable wait
- MemoryLimiter: In-memory sliding-window limiter for single processes
- RedisLimiter: Redis-based limiter for shared quotas (requires redis extra)

Supporting types:
- LimitToken: Permission to perform one call, released exactly once
- LimitOpts: Per-second/minute/hour and parallel quota
- LimitConfig: Quota plus wait timeout, as accepted by WebApiClient

Note: RedisLimiter is lazily imported to avoid requiring the redis package
when only using MemoryLimiter.
"""

from typing import TYPE_CHECKING, cast

from limited_web_client.limiters.base import BaseLimiter, LimitToken
from limited_web_client.limiters.config import LimitConfig, LimitOpts
from limited_web_client.limiters.memory import MemoryLimiter

# Lazy import for optional redis limiter
if TYPE_CHECKING:
    from limited_web_client.limiters.redis import RedisLimiter

__all__ = [
    "BaseLimiter",
    "LimitConfig",
    "LimitOpts",
    "LimitToken",
    "MemoryLimiter",
    "RedisLimiter",
]


def __getattr__(name: str) -> type:
    """Lazy import for the optional redis limiter."""
    if name == "RedisLimiter":
        try:
            from limited_web_client.limiters import redis as redis_module

            return cast(type, redis_module.RedisLimiter)
        except ImportError as e:  # pragma: no cover
            raise ImportError(  # pragma: no cover
                "'RedisLimiter' requires the 'redis' extra. "
                "Install with: pip install limited-web-client[redis]"
            ) from e
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
