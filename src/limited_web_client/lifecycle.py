# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Disposal lifecycle shared by clients and limiters.

States move one way only: ACTIVE -> DISPOSING -> DISPOSED. New operations
are accepted only while ACTIVE; work already in flight when disposal
starts is left to finish. ``dispose()`` runs the subclass teardown hook
exactly once; every later call returns immediately.
"""

from __future__ import annotations

import abc
import logging
from enum import Enum
from types import TracebackType

from .exceptions import DisposedError

logger = logging.getLogger(__name__)


class LifecycleState(Enum):
    """Lifecycle state of a Disposable."""

    ACTIVE = "active"
    DISPOSING = "disposing"
    DISPOSED = "disposed"


class Disposable(abc.ABC):
    """
    Base class for objects owning resources that must be released once.

    Subclasses implement ``_on_dispose()`` and call
    ``verify_not_disposed()`` at the entry of every public operation.

    Example:
        >>> async with WebApiClient(opts) as client:
        ...     await client.invoke_get("status")
    """

    def __init__(self) -> None:
        self._lifecycle_state = LifecycleState.ACTIVE

    @property
    def lifecycle_state(self) -> LifecycleState:
        return self._lifecycle_state

    @property
    def disposing(self) -> bool:
        return self._lifecycle_state is LifecycleState.DISPOSING

    @property
    def disposed(self) -> bool:
        return self._lifecycle_state is LifecycleState.DISPOSED

    def verify_not_disposed(self) -> None:
        """
        Raise DisposedError unless the object is still ACTIVE.

        Raises:
            DisposedError: If disposal has started or finished
        """
        if self._lifecycle_state is not LifecycleState.ACTIVE:
            raise DisposedError(
                f"{type(self).__name__} is {self._lifecycle_state.value}; "
                "no new operations are accepted"
            )

    async def dispose(self) -> None:
        """Release resources. Idempotent."""
        if self._lifecycle_state is not LifecycleState.ACTIVE:
            return
        self._lifecycle_state = LifecycleState.DISPOSING
        try:
            await self._on_dispose()
        finally:
            self._lifecycle_state = LifecycleState.DISPOSED
            logger.debug("%s disposed", type(self).__name__)

    @abc.abstractmethod
    async def _on_dispose(self) -> None:
        """Teardown hook, called exactly once by ``dispose()``."""
        pass

    async def __aenter__(self) -> Disposable:
        self.verify_not_disposed()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.dispose()


__all__ = ["Disposable", "LifecycleState"]
