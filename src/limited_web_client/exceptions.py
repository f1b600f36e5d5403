# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the limited web client library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from WebClientError, making it easy to catch
all client-related exceptions with a single except clause.

The three failure shapes reported by a single HTTP invocation are:

- CommunicationError: the network or transport failed
- WebError: the remote service answered with an error status
- OperationCancelledError: the caller gave up
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any


class WebClientError(Exception):
    """Base exception for all web client errors.

    Example:
        try:
            await client.invoke(request)
        except WebClientError as e:
            logger.error("Web client error: %s", e)
    """

    pass


class CommunicationError(WebClientError):
    """Raised when the underlying network transport fails.

    Wraps DNS resolution failures, refused connections, connect and
    response timeouts and connections closed or reset by the peer.

    Attributes:
        inner_error: The original transport exception, when available.
            It is also chained as ``__cause__``.

    Example:
        try:
            await client.invoke(request)
        except CommunicationError as e:
            if e.is_connect_timeout:
                logger.warning("Service unreachable: %s", e.inner_error)
    """

    CONNECT_TIMEOUT = "Connect Timeout"
    RESPONSE_TIMEOUT = "Response Timeout"

    def __init__(self, message: str, inner_error: BaseException | None = None):
        super().__init__(message)
        self.inner_error = inner_error
        if inner_error is not None:
            self.__cause__ = inner_error

    @property
    def is_connect_timeout(self) -> bool:
        """Whether the deadline expired before any response was observed."""
        return str(self) == self.CONNECT_TIMEOUT


class InvalidOperationError(WebClientError):
    """Raised when an operation is not valid for the object's current content or state."""

    pass


class WebError(WebClientError):
    """Raised for HTTP responses with a status code of 400 or above.

    Carries the full round trip so callers can inspect both what was sent
    and what came back.

    Attributes:
        status_code: HTTP status code of the response.
        status_message: Reason phrase of the response.
        headers: Response headers.
        body: Fully buffered response body.
        request_method: Method of the request that produced the response.
        request_url: Target URL of the request.
        request_headers: Headers sent with the request.
        request_body: Body sent with the request, if any.
    """

    def __init__(
        self,
        status_code: int,
        status_message: str,
        headers: Mapping[str, str],
        body: bytes,
        request_method: str | None = None,
        request_url: str | None = None,
        request_headers: Mapping[str, str] | None = None,
        request_body: bytes | None = None,
    ):
        super().__init__(f"{status_code} {status_message}".rstrip())
        self.status_code = status_code
        self.status_message = status_message
        self.headers = headers
        self.body = body
        self.request_method = request_method
        self.request_url = request_url
        self.request_headers = request_headers
        self.request_body = request_body

    @property
    def content_type(self) -> str | None:
        value = self.headers.get("content-type")
        if value is None:
            return None
        return value.split(";", 1)[0].strip().lower()

    def json(self) -> Any:
        """
        Decode the response body as JSON.

        Raises:
            InvalidOperationError: If the response content type is not JSON
            DecodingError: If the body is not valid JSON
        """
        content_type = self.content_type
        if content_type is None or not (
            content_type == "application/json" or content_type.endswith("+json")
        ):
            raise InvalidOperationError(
                f"Response content type is not JSON: {content_type!r}"
            )
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise DecodingError("Response body is not valid JSON", self.body) from e


class OperationCancelledError(WebClientError):
    """Raised when the caller's cancellation token fires before or during a call.

    Never wraps a transport cause. The remote outcome of a cancelled call
    is unknown: bytes already written cannot be taken back.
    """

    def __init__(self, message: str = "Cancelled by user"):
        super().__init__(message)


class DisposedError(WebClientError):
    """Raised when an operation is attempted on a disposed object."""

    pass


class QuotaTimeoutError(WebClientError):
    """Raised when acquiring a limiter token exceeds its bounded wait.

    Distinct from OperationCancelledError: the quota was exhausted, the
    caller did not give up.

    Attributes:
        timeout_ms: The wait bound that was exceeded, in milliseconds.
        key: The quota key the acquisition targeted, if known.
    """

    def __init__(
        self,
        message: str,
        timeout_ms: float | None = None,
        key: str | None = None,
    ):
        super().__init__(message)
        self.timeout_ms = timeout_ms
        self.key = key


class DecodingError(WebClientError):
    """Raised when a successful response body is not valid JSON.

    Attributes:
        body: The raw body that failed to decode.
    """

    def __init__(self, message: str, body: bytes | None = None):
        super().__init__(message)
        self.body = body


class ConfigurationError(WebClientError):
    """Raised when configuration is invalid or names an unavailable capability."""

    pass


class UnsupportedProxyError(ConfigurationError):
    """Raised when a declared proxy type has no dispatch implementation.

    Attributes:
        proxy_type: The configured proxy type, e.g. ``"socks5"``.
    """

    def __init__(self, proxy_type: str):
        super().__init__(f"Proxy type '{proxy_type}' is not supported")
        self.proxy_type = proxy_type


class LimiterBackendError(WebClientError):
    """Raised when a limiter's storage backend fails (e.g. Redis unavailable)."""

    pass
