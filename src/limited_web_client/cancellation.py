# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Cooperative cancellation tokens.

A CancellationToken is owned by the caller. Library code never cancels it;
it only registers listeners and must remove every listener it adds. Use
``cancel_listener`` to scope a registration so the removal happens on
every exit path.

Example:
    >>> source = CancellationTokenSource()
    >>> task = asyncio.create_task(client.invoke(request, source.token))
    >>> source.cancel()
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator
from typing import Protocol, runtime_checkable

from .exceptions import OperationCancelledError

logger = logging.getLogger(__name__)

CancelListener = Callable[[], None]


@runtime_checkable
class CancellationToken(Protocol):
    """Read side of a cancellation signal."""

    @property
    def is_cancellation_requested(self) -> bool:
        """Whether cancellation has been requested."""
        ...

    def add_cancel_listener(self, callback: CancelListener) -> None:
        """Register a callback invoked once when cancellation is requested."""
        ...

    def remove_cancel_listener(self, callback: CancelListener) -> None:
        """Remove a previously registered callback. Unknown callbacks are ignored."""
        ...

    def throw_if_cancellation_requested(self) -> None:
        """Raise OperationCancelledError if cancellation has been requested."""
        ...


class _NoneCancellationToken:
    """A token that is never cancelled."""

    @property
    def is_cancellation_requested(self) -> bool:
        return False

    def add_cancel_listener(self, callback: CancelListener) -> None:
        pass

    def remove_cancel_listener(self, callback: CancelListener) -> None:
        pass

    def throw_if_cancellation_requested(self) -> None:
        pass

    def __repr__(self) -> str:
        return "NONE_CANCELLATION_TOKEN"


NONE_CANCELLATION_TOKEN: CancellationToken = _NoneCancellationToken()


class _SourceToken:
    def __init__(self, source: CancellationTokenSource):
        self._source = source

    @property
    def is_cancellation_requested(self) -> bool:
        return self._source.is_cancellation_requested

    def add_cancel_listener(self, callback: CancelListener) -> None:
        self._source._listeners.append(callback)

    def remove_cancel_listener(self, callback: CancelListener) -> None:
        with contextlib.suppress(ValueError):
            self._source._listeners.remove(callback)

    def throw_if_cancellation_requested(self) -> None:
        if self._source.is_cancellation_requested:
            raise OperationCancelledError(self._source.reason)


class CancellationTokenSource:
    """
    Owner side of a cancellation signal.

    Listeners run synchronously inside ``cancel()`` in registration order.
    A listener may remove itself (or others) while running. If listeners
    raise, every listener still runs and the first exception is re-raised.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._reason = "Cancelled by user"
        self._listeners: list[CancelListener] = []
        self._token = _SourceToken(self)

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str:
        return self._reason

    @property
    def listener_count(self) -> int:
        """Number of currently registered listeners."""
        return len(self._listeners)

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation. Subsequent calls are no-ops."""
        if self._cancelled:
            return
        self._cancelled = True
        if reason is not None:
            self._reason = reason

        first_error: BaseException | None = None
        for callback in list(self._listeners):
            try:
                callback()
            except Exception as e:
                logger.debug("Cancel listener %r raised: %s", callback, e)
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error


@contextlib.contextmanager
def cancel_listener(
    token: CancellationToken | None, callback: CancelListener
) -> Iterator[None]:
    """
    Scope a cancel listener registration.

    The listener is registered on entry and removed exactly once on exit,
    whether the block completes, raises or the listener already fired.
    """
    if token is None:
        yield
        return
    token.add_cancel_listener(callback)
    try:
        yield
    finally:
        token.remove_cancel_listener(callback)


__all__ = [
    "NONE_CANCELLATION_TOKEN",
    "CancelListener",
    "CancellationToken",
    "CancellationTokenSource",
    "cancel_listener",
]
