# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Dispatch mode selection.

Turns a WebRequest into the httpx.Request that actually goes on the wire:

* direct: sent to the target host with the path and query as request target
* HTTP proxy: sent to the proxy, with the absolute target URL as request
  target and the Host header forced to the target (forward-proxy form)
"""

from enum import Enum

import httpx

from ..exceptions import UnsupportedProxyError
from ..types.options import HttpProxyOpts, ProxyOpts, Socks5ProxyOpts
from ..types.request import WebRequest


class DispatchMode(Enum):
    DIRECT = "direct"
    HTTP_PROXY = "http_proxy"


def host_header_value(url: httpx.URL) -> str:
    """Value of the Host header for ``url``: host, plus port when explicit."""
    host = url.raw_host.decode("ascii")
    if ":" in host:
        host = f"[{host}]"
    if url.port is not None:
        return f"{host}:{url.port}"
    return host


def build_outgoing(
    request: WebRequest, proxy_opts: ProxyOpts | None
) -> tuple[DispatchMode, httpx.Request]:
    """
    Build the wire request for the configured dispatch mode.

    Raises:
        UnsupportedProxyError: For proxy variants without a dispatch path
    """
    if proxy_opts is None:
        return DispatchMode.DIRECT, httpx.Request(
            request.method,
            request.url,
            headers=request.headers,
            content=request.body,
        )

    if isinstance(proxy_opts, HttpProxyOpts):
        headers = httpx.Headers(request.headers)
        # The proxy needs the target's Host whatever the caller sent
        headers["Host"] = host_header_value(request.url)
        proxy_url = httpx.URL(
            scheme="http", host=proxy_opts.host, port=proxy_opts.port, path="/"
        )
        return DispatchMode.HTTP_PROXY, httpx.Request(
            request.method,
            proxy_url,
            headers=headers,
            content=request.body,
            extensions={"target": str(request.url).encode("ascii")},
        )

    if isinstance(proxy_opts, Socks5ProxyOpts):
        raise UnsupportedProxyError(proxy_opts.type)

    raise UnsupportedProxyError(getattr(proxy_opts, "type", type(proxy_opts).__name__))


__all__ = ["DispatchMode", "build_outgoing", "host_header_value"]
