# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
WebClient: one HTTP exchange per call, resolved exactly once.

Each ``invoke`` runs a small per-call state machine. Four completion sources
race for a single ResolutionLatch:

1. the exchange task finishing with a fully buffered response
2. the exchange task failing at the transport level
3. the timeout timer firing
4. the caller's cancellation token firing

The first writer wins; every other source becomes a no-op. Whatever wins,
the timer is disarmed, the cancel listener is removed and the exchange
task is aborted (at most once) before ``invoke`` returns.

Status policy: any status below 400 (3xx included) is a success. Redirects
are never followed.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from ..cancellation import NONE_CANCELLATION_TOKEN, CancellationToken, cancel_listener
from ..exceptions import CommunicationError, OperationCancelledError, WebError
from ..lifecycle import Disposable
from ..types.options import ProxyOpts, SslOpts, WebClientConfig
from ..types.request import WebRequest, WebResponse
from .dispatch import DispatchMode, build_outgoing
from .latch import ResolutionLatch
from .tls import build_ssl_context

logger = logging.getLogger(__name__)

TRANSPORT_FAILURE_MESSAGE = "HTTP request failed. See inner_error for details"


def _reason_phrase(response: httpx.Response) -> str:
    raw = response.extensions.get("reason_phrase")
    if isinstance(raw, bytes) and raw:
        return raw.decode("ascii", errors="replace")
    return response.reason_phrase


class _Invocation:
    """State for one in-flight exchange."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        request: WebRequest,
        outgoing: httpx.Request,
        timeout_ms: float | None,
        token: CancellationToken,
        log: logging.Logger,
    ):
        self._client = client
        self._request = request
        self._outgoing = outgoing
        self._timeout_ms = timeout_ms
        self._token = token
        self._log = log

        self._latch: ResolutionLatch[WebResponse] = ResolutionLatch()
        self._task: asyncio.Task[WebResponse] | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._response_started = False
        self._timed_out = False
        self._aborted = False

    @property
    def aborted(self) -> bool:
        return self._aborted

    async def run(self) -> WebResponse:
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._exchange())
        self._task.add_done_callback(self._on_exchange_done)
        if self._timeout_ms is not None:
            self._timer = loop.call_later(self._timeout_ms / 1000.0, self._on_timeout)

        try:
            with cancel_listener(self._token, self._on_cancel):
                if self._token.is_cancellation_requested:
                    self._on_cancel()
                return await self._latch.wait()
        finally:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._abort()
            self._latch.discard()

    async def _exchange(self) -> WebResponse:
        response = await self._client.send(self._outgoing, stream=True)
        self._response_started = True
        try:
            body = bytearray()
            # Raw bytes: Content-Encoding is left to the caller
            async for chunk in response.aiter_raw():
                body.extend(chunk)
        finally:
            await response.aclose()

        return WebResponse(
            status_code=response.status_code,
            status_message=_reason_phrase(response),
            headers=response.headers,
            body=bytes(body),
        )

    def _abort(self) -> None:
        if self._aborted or self._task is None or self._task.done():
            return
        self._aborted = True
        self._task.cancel()

    def _on_exchange_done(self, task: asyncio.Task[WebResponse]) -> None:
        if task.cancelled():
            # Aborted by the timer, the token or the caller; they resolve themselves
            return

        error = task.exception()
        if error is None:
            response = task.result()
            if self._log.isEnabledFor(logging.DEBUG):
                self._log.debug(
                    "Response received: status=%d %s, body_length=%d",
                    response.status_code,
                    response.status_message,
                    len(response.body),
                )
            if response.status_code < 400:
                self._latch.resolve(response)
            else:
                self._latch.reject(
                    WebError(
                        response.status_code,
                        response.status_message,
                        response.headers,
                        response.body,
                        request_method=self._request.method,
                        request_url=str(self._request.url),
                        request_headers=self._request.headers,
                        request_body=self._request.body,
                    )
                )
            return

        if isinstance(error, (httpx.RequestError, OSError)):
            if self._timed_out and not self._response_started:
                message = CommunicationError.CONNECT_TIMEOUT
            else:
                message = TRANSPORT_FAILURE_MESSAGE
            self._log.debug("%s: %r", message, error)
            self._latch.reject(CommunicationError(message, error))
        else:
            self._latch.reject(error)

    def _on_timeout(self) -> None:
        self._timed_out = True
        if self._latch.is_resolved:
            return

        if self._response_started:
            message = CommunicationError.RESPONSE_TIMEOUT
            inner = TimeoutError(
                f"Response not completed within {self._timeout_ms} ms"
            )
        else:
            message = CommunicationError.CONNECT_TIMEOUT
            inner = TimeoutError(f"No response within {self._timeout_ms} ms")
        self._log.debug("%s: %s", message, inner)
        self._latch.reject(CommunicationError(message, inner))
        self._abort()

    def _on_cancel(self) -> None:
        if self._latch.is_resolved:
            return
        self._abort()

        error: OperationCancelledError
        try:
            self._token.throw_if_cancellation_requested()
            # Token signalled but did not raise
            error = OperationCancelledError()
        except OperationCancelledError as e:
            error = e
        except Exception as e:
            self._log.debug("Cancellation token raised unexpected %r", e)
            error = OperationCancelledError()
        self._log.debug("Invocation cancelled: %s", error)
        self._latch.reject(error)


class WebClient(Disposable):
    """
    HTTP(S) transport performing exactly one exchange per ``invoke``.

    Supports direct dispatch, forwarding through an HTTP proxy, client TLS
    material, a single exchange deadline and cooperative cancellation.
    Response bodies are buffered in full and returned exactly as received.

    Example:
        >>> config = WebClientConfig(timeout_ms=5000)
        >>> async with WebClient(config) as client:
        ...     response = await client.invoke(
        ...         WebRequest(url="https://api.example.com/status", method="GET")
        ...     )
    """

    def __init__(
        self,
        config: WebClientConfig | None = None,
        *,
        logger: logging.Logger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the WebClient.

        Args:
            config: Timeout, proxy and TLS options (defaults: none of them)
            logger: Logger for request tracing (default: this module's logger)
            transport: Optional httpx transport replacing the network
                transport, e.g. httpx.MockTransport in tests

        Raises:
            ConfigurationError: If the TLS material cannot be loaded
        """
        super().__init__()
        self._config = config or WebClientConfig()
        self._log = logger if logger is not None else logging.getLogger(__name__)

        if transport is None:
            ssl_opts = self._config.ssl_opts
            transport = httpx.AsyncHTTPTransport(
                verify=build_ssl_context(ssl_opts) if ssl_opts is not None else True,
                retries=0,
            )
        # Deadline, redirects and proxies are handled here, not by httpx
        self._client = httpx.AsyncClient(
            transport=transport,
            timeout=None,
            follow_redirects=False,
            trust_env=False,
        )

    @property
    def config(self) -> WebClientConfig:
        return self._config

    @property
    def timeout_ms(self) -> float | None:
        return self._config.timeout_ms

    @property
    def proxy_opts(self) -> ProxyOpts | None:
        return self._config.proxy_opts

    @property
    def ssl_opts(self) -> SslOpts | None:
        return self._config.ssl_opts

    @property
    def log(self) -> logging.Logger:
        return self._log

    async def invoke(
        self,
        request: WebRequest,
        cancellation_token: CancellationToken | None = None,
    ) -> WebResponse:
        """
        Perform one HTTP exchange.

        Args:
            request: The request to send
            cancellation_token: Optional caller cancellation signal

        Returns:
            The fully buffered response, for any status below 400

        Raises:
            DisposedError: If the client has been disposed
            OperationCancelledError: If the token is or becomes cancelled
            UnsupportedProxyError: If the configured proxy cannot dispatch
            CommunicationError: On transport failure or timeout
            WebError: On a response status of 400 or above
        """
        self.verify_not_disposed()
        token = cancellation_token or NONE_CANCELLATION_TOKEN
        token.throw_if_cancellation_requested()

        mode, outgoing = build_outgoing(request, self._config.proxy_opts)
        if self._log.isEnabledFor(logging.DEBUG):
            self._log.debug(
                "Begin invoke: method=%s, url=%s, via=%s, headers=%s, body_length=%s",
                request.method,
                request.url,
                f"proxy {outgoing.url.host}:{outgoing.url.port}"
                if mode is DispatchMode.HTTP_PROXY
                else mode.value,
                dict(outgoing.headers),
                None if request.body is None else len(request.body),
            )

        invocation = _Invocation(
            self._client,
            request,
            outgoing,
            self._config.timeout_ms,
            token,
            self._log,
        )
        return await invocation.run()

    async def _on_dispose(self) -> None:
        await self._client.aclose()


__all__ = ["TRANSPORT_FAILURE_MESSAGE", "WebClient"]
