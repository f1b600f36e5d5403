# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Type definitions for requests, responses and client options."""

from .options import (
    HttpProxyOpts,
    ProxyOpts,
    Socks5ProxyOpts,
    SslCertOpts,
    SslOpts,
    SslOptsBase,
    SslPfxOpts,
    WebClientConfig,
)
from .request import SUPPORTED_SCHEMES, HeadersLike, WebRequest, WebResponse

__all__ = [
    "SUPPORTED_SCHEMES",
    "HeadersLike",
    # Options
    "HttpProxyOpts",
    "ProxyOpts",
    "Socks5ProxyOpts",
    "SslCertOpts",
    "SslOpts",
    "SslOptsBase",
    "SslPfxOpts",
    "WebClientConfig",
    # Request / response
    "WebRequest",
    "WebResponse",
]
