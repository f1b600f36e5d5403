# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
WebApiClient: JSON API calls behind a quota gate.

Every call follows the same path:

1. refuse if the client is no longer ACTIVE (DisposedError)
2. acquire a limit token, bounded by the wait timeout and the caller's
   cancellation token; failures here never reach the transport
3. resolve the method path against the base URL and perform the exchange
4. release the token, whatever happened
5. decode the response body as JSON (DecodingError if it is not)

Subclass it and expose typed methods for a concrete API:

    class ExchangeApi(WebApiClient):
        async def ticker(self, pair: str) -> dict:
            return await self.call_web_method_get("public", {"command": "ticker", "pair": pair})
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import time
from collections.abc import AsyncIterator, Mapping
from typing import Any
from urllib.parse import urlencode

import httpx

from ..cancellation import CancellationToken
from ..exceptions import DecodingError
from ..lifecycle import Disposable
from ..limiters.config import LimitConfig
from ..limiters.memory import MemoryLimiter
from ..observability.metrics import (
    InvocationMetrics,
    InvocationOutcome,
    get_prometheus_invocation_metrics,
)
from ..protocols.limiter import LimiterProtocol, LimitTokenProtocol
from ..protocols.transport import WebClientProtocol
from ..transport.client import WebClient
from ..types.options import WebClientConfig
from ..types.request import HeadersLike, WebRequest, WebResponse
from .config import DEFAULT_LIMIT_TIMEOUT_MS, WebApiClientOpts

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class WebApiClient(Disposable):
    """
    Rate-limited JSON API client.

    Concurrent calls are independent: each holds its own limit token and
    its own exchange. Disposal waits for calls already in flight, then
    disposes the limiter and transport the client built itself.

    Example:
        >>> opts = WebApiClientOpts(
        ...     url="https://api.example.com/v1/",
        ...     limit=LimitConfig(LimitOpts(per_second=2, parallel=2), timeout_ms=3000),
        ...     invoke_timeout_ms=5000,
        ... )
        >>> async with WebApiClient(opts) as client:
        ...     status = await client.invoke_get("status")
    """

    def __init__(
        self,
        opts: WebApiClientOpts,
        *,
        metrics: InvocationMetrics | None = None,
    ):
        """
        Initialize the API client.

        Args:
            opts: Base URL, limiter and transport options
            metrics: Outcome counters to record into (default: a private instance)
        """
        super().__init__()
        self._opts = opts
        self._base_url = httpx.URL(opts.url)

        self._limiter: LimiterProtocol | None
        if opts.limit is None:
            self._limiter = None
            self._owns_limiter = False
            self._limit_timeout_ms = 0.0
        elif isinstance(opts.limit, LimitConfig):
            self._limiter = MemoryLimiter(opts.limit.opts, key=opts.limit.key)
            self._owns_limiter = True
            self._limit_timeout_ms = opts.limit.timeout_ms
        else:
            self._limiter = opts.limit
            self._owns_limiter = False
            self._limit_timeout_ms = (
                opts.limit_timeout_ms
                if opts.limit_timeout_ms is not None
                else DEFAULT_LIMIT_TIMEOUT_MS
            )

        self._web_client: WebClientProtocol
        if opts.web_client is None or isinstance(opts.web_client, WebClientConfig):
            self._web_client = WebClient(opts.build_web_client_config())
            self._owns_web_client = True
        else:
            self._web_client = opts.web_client
            self._owns_web_client = False

        self._metrics = metrics if metrics is not None else InvocationMetrics()
        self._in_flight = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    @property
    def limiter(self) -> LimiterProtocol | None:
        return self._limiter

    @property
    def web_client(self) -> WebClientProtocol:
        return self._web_client

    @property
    def metrics(self) -> InvocationMetrics:
        return self._metrics

    @property
    def in_flight(self) -> int:
        """Number of calls currently in progress."""
        return self._in_flight

    @contextlib.asynccontextmanager
    async def limit_threshold(
        self, cancellation_token: CancellationToken | None = None
    ) -> AsyncIterator[LimitTokenProtocol | None]:
        """
        Hold a limit token for the duration of the block.

        Yields None when no limiter is configured. The token is released on
        every exit path. If the block raised, a failing release is logged
        and the block's error propagates.

        Raises:
            QuotaTimeoutError: If no token frees up within the wait timeout
            OperationCancelledError: If the token fires while waiting
            LimiterBackendError: If releasing the token fails after a clean exit
        """
        if self._limiter is None:
            yield None
            return

        token = await self._limiter.acquire(self._limit_timeout_ms, cancellation_token)
        try:
            yield token
        except BaseException:
            try:
                await token.release()
            except Exception as e:
                logger.warning("Failed to release limit token: %r", e)
            raise
        await token.release()

    async def call_web_method_get(
        self,
        web_method_name: str,
        query_args: Mapping[str, Any] | None = None,
        headers: HeadersLike = None,
        cancellation_token: CancellationToken | None = None,
    ) -> Any:
        """GET ``web_method_name`` with ``query_args`` url-encoded into the query string."""
        path = web_method_name
        if query_args:
            path += "?" + urlencode(query_args, doseq=True)
        return await self.invoke_get(path, headers, cancellation_token)

    async def call_web_method_post(
        self,
        web_method_name: str,
        post_args: Mapping[str, Any],
        headers: HeadersLike = None,
        cancellation_token: CancellationToken | None = None,
    ) -> Any:
        """POST ``post_args`` as a url-encoded form to ``web_method_name``."""
        return await self.invoke_post(
            web_method_name, post_args, headers, cancellation_token
        )

    async def invoke_get(
        self,
        path: str,
        headers: HeadersLike = None,
        cancellation_token: CancellationToken | None = None,
    ) -> Any:
        """
        GET ``path`` (resolved against the base URL) and decode the JSON body.

        Raises:
            DisposedError: If the client is not active
            QuotaTimeoutError: If no limit token frees up in time
            OperationCancelledError: If the caller cancels
            CommunicationError: On transport failure or timeout
            WebError: On a response status of 400 or above
            DecodingError: If the body is not valid JSON
        """
        return await self._invoke("GET", path, headers, None, cancellation_token)

    async def invoke_post(
        self,
        path: str,
        body: Mapping[str, Any] | bytes,
        headers: HeadersLike = None,
        cancellation_token: CancellationToken | None = None,
    ) -> Any:
        """
        POST to ``path`` and decode the JSON body.

        A mapping body is form-encoded and sent with a form Content-Type;
        bytes are sent as given. Content-Length is always set. ``headers``
        override both.

        Raises:
            The same errors as invoke_get.
        """
        post_headers = httpx.Headers()
        if isinstance(body, (bytes, bytearray)):
            data = bytes(body)
        else:
            data = urlencode(body, doseq=True).encode("ascii")
            post_headers["Content-Type"] = FORM_CONTENT_TYPE
        post_headers["Content-Length"] = str(len(data))
        if headers:
            post_headers.update(headers)
        return await self._invoke("POST", path, post_headers, data, cancellation_token)

    async def _invoke(
        self,
        method: str,
        path: str,
        headers: HeadersLike,
        body: bytes | None,
        cancellation_token: CancellationToken | None,
    ) -> Any:
        self.verify_not_disposed()
        self._in_flight += 1
        self._idle.clear()
        started = time.monotonic()
        error: BaseException | None = None
        try:
            async with self.limit_threshold(cancellation_token):
                request = WebRequest(
                    url=self._base_url.join(path),
                    method=method,
                    headers=httpx.Headers(headers or {}),
                    body=body,
                )
                response = await self._web_client.invoke(request, cancellation_token)
            return self._decode(response)
        except BaseException as e:
            error = e
            raise
        finally:
            self._record(method, error, time.monotonic() - started)
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()

    @staticmethod
    def _decode(response: WebResponse) -> Any:
        try:
            return json.loads(response.body)
        except ValueError as e:
            raise DecodingError(
                f"Response body is not valid JSON: {e}", response.body
            ) from e

    def _record(self, method: str, error: BaseException | None, duration: float) -> None:
        outcome = InvocationOutcome.from_exception(error)
        self._metrics.record(outcome, duration)
        prometheus = get_prometheus_invocation_metrics()
        if prometheus is not None:
            prometheus.observe(method, outcome, duration)
        if error is not None:
            logger.debug(
                "%s call failed: outcome=%s, error=%r", method, outcome.value, error
            )

    async def _on_dispose(self) -> None:
        if self._in_flight:
            logger.debug("Waiting for %d in-flight calls before disposal", self._in_flight)
            await self._idle.wait()
        if self._owns_limiter and self._limiter is not None:
            await self._limiter.dispose()
        if self._owns_web_client:
            await self._web_client.dispose()


__all__ = ["FORM_CONTENT_TYPE", "WebApiClient"]
