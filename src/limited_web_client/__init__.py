# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Limited Web Client - Rate-limited HTTP(S) API calls.

This library performs single HTTP(S) exchanges with proxy, TLS, timeout and
cancellation support, and gates JSON API calls behind a call-rate quota.

Key Features:
    - One exchange per call, resolved exactly once (response, web error,
      communication error, timeout or cancellation)
    - Forwarding through an HTTP proxy
    - Custom CA, client certificate (PEM or PKCS#12) and verification toggle
    - Per-second/minute/hour and parallel quotas with bounded waits
    - Multiple limiter options (memory, Redis)
    - Cooperative cancellation tokens across limiter waits and exchanges

Quick Start:
    >>> from limited_web_client import LimitConfig, LimitOpts, WebApiClient, WebApiClientOpts
    >>>
    >>> opts = WebApiClientOpts(
    ...     url="https://api.example.com/",
    ...     limit=LimitConfig(LimitOpts(per_second=2, parallel=2), timeout_ms=3000),
    ... )
    >>> async with WebApiClient(opts) as client:
    ...     ticker = await client.call_web_method_get("ticker", {"pair": "BTC_ETH"})

Main Exports:
    - WebClient: Single-exchange HTTP(S) transport
    - WebApiClient, WebApiClientOpts: Rate-limited JSON API client
    - MemoryLimiter, RedisLimiter: Limiters
    - CancellationTokenSource: Cooperative cancellation

Note: RedisLimiter requires the 'redis' extra. Install with:
    pip install limited-web-client[redis]

Version: 1.0.0
"""

__version__ = "1.0.0"

from typing import TYPE_CHECKING

from .api import WebApiClient, WebApiClientOpts
from .cancellation import (
    NONE_CANCELLATION_TOKEN,
    CancellationToken,
    CancellationTokenSource,
)
from .exceptions import (
    CommunicationError,
    ConfigurationError,
    DecodingError,
    DisposedError,
    InvalidOperationError,
    LimiterBackendError,
    OperationCancelledError,
    QuotaTimeoutError,
    UnsupportedProxyError,
    WebClientError,
    WebError,
)
from .lifecycle import Disposable, LifecycleState
from .limiters import BaseLimiter, LimitConfig, LimitOpts, LimitToken, MemoryLimiter
from .protocols import LimiterProtocol, LimitTokenProtocol, WebClientProtocol
from .transport import WebClient
from .types import (
    HttpProxyOpts,
    Socks5ProxyOpts,
    SslCertOpts,
    SslOptsBase,
    SslPfxOpts,
    WebClientConfig,
    WebRequest,
    WebResponse,
)

# Lazy import for optional redis limiter
if TYPE_CHECKING:
    from .limiters.redis import RedisLimiter

__all__ = [
    "NONE_CANCELLATION_TOKEN",
    # Limiters
    "BaseLimiter",
    # Cancellation
    "CancellationToken",
    "CancellationTokenSource",
    "CommunicationError",
    "ConfigurationError",
    "DecodingError",
    # Lifecycle
    "Disposable",
    "DisposedError",
    # Options
    "HttpProxyOpts",
    "InvalidOperationError",
    "LifecycleState",
    "LimitConfig",
    "LimitOpts",
    "LimitToken",
    "LimitTokenProtocol",
    "LimiterBackendError",
    # Protocols
    "LimiterProtocol",
    "MemoryLimiter",
    "OperationCancelledError",
    "QuotaTimeoutError",
    "RedisLimiter",  # Lazy loaded - requires redis extra
    "Socks5ProxyOpts",
    "SslCertOpts",
    "SslOptsBase",
    "SslPfxOpts",
    "UnsupportedProxyError",
    # API client
    "WebApiClient",
    "WebApiClientOpts",
    # Transport
    "WebClient",
    "WebClientConfig",
    # Exceptions
    "WebClientError",
    "WebClientProtocol",
    "WebError",
    # Request / response
    "WebRequest",
    "WebResponse",
]


def __getattr__(name: str) -> type:
    """Lazy import for optional redis limiter."""
    if name == "RedisLimiter":
        from .limiters.redis import RedisLimiter

        return RedisLimiter
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
