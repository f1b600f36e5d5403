# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for HTTP transports."""

from typing import Protocol, runtime_checkable

from ..cancellation import CancellationToken
from ..types.request import WebRequest, WebResponse


@runtime_checkable
class WebClientProtocol(Protocol):
    """
    A transport that performs exactly one HTTP exchange per call.

    WebClient is the bundled implementation. WebApiClient accepts any
    object following this protocol, which is how tests substitute fakes.
    """

    async def invoke(
        self,
        request: WebRequest,
        cancellation_token: CancellationToken | None = None,
    ) -> WebResponse:
        """
        Perform the exchange.

        Raises:
            CommunicationError: On transport failure or timeout
            WebError: On a response status of 400 or above
            OperationCancelledError: When the token fires first
        """
        ...

    async def dispose(self) -> None:
        """Release transport resources."""
        ...
