# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Proxy, TLS and client configuration.

Proxy and TLS options are tagged variants: the class of the options object
is the tag, decided at construction time and matched at dispatch time.

Proxy variants:
    * HttpProxyOpts: forward requests through an HTTP proxy
    * Socks5ProxyOpts: declared but not dispatchable (raises
      UnsupportedProxyError on invoke)

TLS variants:
    * SslOptsBase: CA bundle and verification switch only
    * SslCertOpts: adds a PEM client key and certificate
    * SslPfxOpts: adds a PKCS#12 bundle and its passphrase
"""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class HttpProxyOpts:
    """Forward all requests through an HTTP proxy at host:port."""

    host: str
    port: int

    type: ClassVar[str] = "http"

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("proxy host must not be empty")
        if not 0 < self.port < 65536:
            raise ValueError(f"proxy port must be between 1 and 65535, got {self.port}")


@dataclass(frozen=True)
class Socks5ProxyOpts:
    """SOCKS5 proxy marker. No dispatch path exists for it."""

    type: ClassVar[str] = "socks5"


ProxyOpts = HttpProxyOpts | Socks5ProxyOpts


@dataclass(frozen=True)
class SslOptsBase:
    """
    TLS options shared by every variant.

    Attributes:
        ca: PEM encoded CA certificates merged into the default trust store
        reject_unauthorized: When False, server certificates are not verified.
            None keeps the default (verify).
    """

    ca: bytes | None = None
    reject_unauthorized: bool | None = None


@dataclass(frozen=True)
class SslCertOpts(SslOptsBase):
    """Client authentication with a PEM key and certificate."""

    key: bytes = b""
    cert: bytes = b""

    def __post_init__(self) -> None:
        if not self.key or not self.cert:
            raise ValueError("SslCertOpts requires both key and cert")


@dataclass(frozen=True)
class SslPfxOpts(SslOptsBase):
    """Client authentication with a PKCS#12 (pfx) bundle."""

    pfx: bytes = b""
    passphrase: str = ""

    def __post_init__(self) -> None:
        if not self.pfx:
            raise ValueError("SslPfxOpts requires pfx data")


SslOpts = SslOptsBase | SslCertOpts | SslPfxOpts


@dataclass(frozen=True)
class WebClientConfig:
    """
    Configuration for WebClient.

    Attributes:
        timeout_ms: Single deadline for the whole exchange in milliseconds.
            None means no timeout is enforced.
        proxy_opts: Optional proxy variant
        ssl_opts: Optional TLS variant, applied to https targets only
    """

    timeout_ms: float | None = None
    proxy_opts: ProxyOpts | None = None
    ssl_opts: SslOpts | None = None

    def __post_init__(self) -> None:
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if self.proxy_opts is not None and not isinstance(
            self.proxy_opts, (HttpProxyOpts, Socks5ProxyOpts)
        ):
            raise TypeError(f"unknown proxy options: {type(self.proxy_opts).__name__}")
        if self.ssl_opts is not None and not isinstance(self.ssl_opts, SslOptsBase):
            raise TypeError(f"unknown ssl options: {type(self.ssl_opts).__name__}")


__all__ = [
    "HttpProxyOpts",
    "ProxyOpts",
    "Socks5ProxyOpts",
    "SslCertOpts",
    "SslOpts",
    "SslOptsBase",
    "SslPfxOpts",
    "WebClientConfig",
]
