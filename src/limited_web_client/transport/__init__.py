# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
HTTP transport core.

Exports:
    WebClient: Performs one HTTP exchange per call with proxy, TLS, timeout
        and cancellation support
    ResolutionLatch: Single-assignment outcome slot used by WebClient
    build_ssl_context: Builds an SSLContext from SslOpts variants
"""

from .client import WebClient
from .dispatch import DispatchMode, build_outgoing
from .latch import ResolutionLatch
from .tls import build_ssl_context

__all__ = [
    "DispatchMode",
    "ResolutionLatch",
    "WebClient",
    "build_outgoing",
    "build_ssl_context",
]
