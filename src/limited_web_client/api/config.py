# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Configuration for WebApiClient.

``limit`` and ``web_client`` each accept either settings (the client then
builds and owns the collaborator) or a ready instance (injected; the
client never disposes it).
"""

from dataclasses import dataclass

import httpx

from ..limiters.config import LimitConfig
from ..protocols.limiter import LimiterProtocol
from ..protocols.transport import WebClientProtocol
from ..types.options import ProxyOpts, WebClientConfig
from ..types.request import SUPPORTED_SCHEMES

DEFAULT_LIMIT_TIMEOUT_MS = 30000.0


@dataclass
class WebApiClientOpts:
    """
    Options for WebApiClient.

    Attributes:
        url: Absolute base URL that method paths are resolved against
        limit: LimitConfig (an owned MemoryLimiter is built) or an injected limiter
        limit_timeout_ms: Token wait bound for an injected limiter
            (default: 30000). Ignored for LimitConfig, which carries its own.
        web_client: WebClientConfig (an owned WebClient is built) or an
            injected transport
        invoke_timeout_ms: Exchange timeout for the built WebClient when
            ``web_client`` is not given
        proxy: Proxy for the built WebClient when ``web_client`` is not given
    """

    url: str
    limit: LimitConfig | LimiterProtocol | None = None
    limit_timeout_ms: float | None = None
    web_client: WebClientConfig | WebClientProtocol | None = None
    invoke_timeout_ms: float | None = None
    proxy: ProxyOpts | None = None

    def __post_init__(self) -> None:
        base = httpx.URL(self.url)
        if base.scheme not in SUPPORTED_SCHEMES or not base.host:
            raise ValueError(f"url must be an absolute http(s) URL, got {self.url!r}")
        if self.limit_timeout_ms is not None and self.limit_timeout_ms < 0:
            raise ValueError("limit_timeout_ms must not be negative")
        if self.web_client is not None and (
            self.invoke_timeout_ms is not None or self.proxy is not None
        ):
            raise ValueError(
                "invoke_timeout_ms and proxy only apply when web_client is not given"
            )

    def build_web_client_config(self) -> WebClientConfig:
        """Settings for the owned WebClient."""
        if isinstance(self.web_client, WebClientConfig):
            return self.web_client
        return WebClientConfig(timeout_ms=self.invoke_timeout_ms, proxy_opts=self.proxy)


__all__ = ["DEFAULT_LIMIT_TIMEOUT_MS", "WebApiClientOpts"]
