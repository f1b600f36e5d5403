# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request and response values for a single HTTP invocation.

Both are immutable. A WebResponse is only ever built from a fully buffered
body; a partially received response is never exposed.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

SUPPORTED_SCHEMES = ("http", "https")

# RFC 9110 token characters
_METHOD_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

HeadersLike = Mapping[str, str] | httpx.Headers | None


@dataclass(frozen=True)
class WebRequest:
    """
    An outbound HTTP request.

    Attributes:
        url: Absolute target URL (scheme http or https). Strings are parsed.
        method: HTTP verb, e.g. "GET" or "POST"
        headers: Request headers; names are case-insensitive
        body: Optional raw request body
    """

    url: httpx.URL
    method: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes | None = None

    def __post_init__(self) -> None:
        url = self.url if isinstance(self.url, httpx.URL) else httpx.URL(self.url)
        if url.scheme not in SUPPORTED_SCHEMES:
            raise ValueError(
                f"url must be absolute with scheme http or https, got {str(url)!r}"
            )
        if not url.host:
            raise ValueError(f"url must have a host, got {str(url)!r}")
        if not self.method or not _METHOD_RE.fullmatch(self.method):
            raise ValueError(f"method must be a non-empty HTTP token, got {self.method!r}")
        if self.body is not None and not isinstance(self.body, bytes):
            raise TypeError("body must be bytes")

        object.__setattr__(self, "url", url)
        if not isinstance(self.headers, httpx.Headers):
            object.__setattr__(self, "headers", httpx.Headers(self.headers or {}))


@dataclass(frozen=True)
class WebResponse:
    """
    A fully received HTTP response.

    Attributes:
        status_code: HTTP status code
        status_message: Reason phrase sent by the server
        headers: Response headers; names are case-insensitive
        body: Complete response body
    """

    status_code: int
    status_message: str
    headers: httpx.Headers
    body: bytes

    @property
    def content_type(self) -> str | None:
        value = self.headers.get("content-type")
        if value is None:
            return None
        return value.split(";", 1)[0].strip().lower()

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict view, useful for logging."""
        return {
            "status_code": self.status_code,
            "status_message": self.status_message,
            "headers": dict(self.headers),
            "body_length": len(self.body),
        }


__all__ = ["SUPPORTED_SCHEMES", "HeadersLike", "WebRequest", "WebResponse"]
