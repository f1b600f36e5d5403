# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for pluggable collaborators.

Available protocols:
- WebClientProtocol: Interface for transports that perform one HTTP exchange
- LimiterProtocol: Interface for call-rate limiters handing out tokens
- LimitTokenProtocol: Interface for a token acquired from a limiter
"""

from .limiter import LimiterProtocol, LimitTokenProtocol
from .transport import WebClientProtocol

__all__ = [
    "LimitTokenProtocol",
    "LimiterProtocol",
    "WebClientProtocol",
]
