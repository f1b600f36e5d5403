"""Tests for the Disposable lifecycle guard."""

import asyncio

import pytest

from limited_web_client.exceptions import DisposedError
from limited_web_client.lifecycle import Disposable, LifecycleState


class _Resource(Disposable):
    def __init__(self, fail=False, gate=None):
        super().__init__()
        self.dispose_calls = 0
        self.fail = fail
        self.gate = gate
        self.state_during_dispose = None

    async def _on_dispose(self):
        self.dispose_calls += 1
        self.state_during_dispose = self.lifecycle_state
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise RuntimeError("teardown failed")


class TestDisposable:
    def test_starts_active(self):
        resource = _Resource()
        assert resource.lifecycle_state is LifecycleState.ACTIVE
        assert not resource.disposing
        assert not resource.disposed
        resource.verify_not_disposed()

    @pytest.mark.asyncio
    async def test_dispose_runs_hook_once(self):
        resource = _Resource()

        await resource.dispose()
        await resource.dispose()

        assert resource.dispose_calls == 1
        assert resource.disposed
        assert resource.state_during_dispose is LifecycleState.DISPOSING

    @pytest.mark.asyncio
    async def test_verify_after_dispose_raises(self):
        resource = _Resource()
        await resource.dispose()

        with pytest.raises(DisposedError, match="disposed"):
            resource.verify_not_disposed()

    @pytest.mark.asyncio
    async def test_verify_while_disposing_raises(self):
        gate = asyncio.Event()
        resource = _Resource(gate=gate)

        task = asyncio.create_task(resource.dispose())
        await asyncio.sleep(0)

        assert resource.disposing
        with pytest.raises(DisposedError, match="disposing"):
            resource.verify_not_disposed()

        # A concurrent dispose returns immediately
        await resource.dispose()
        assert resource.dispose_calls == 1

        gate.set()
        await task
        assert resource.disposed

    @pytest.mark.asyncio
    async def test_failed_hook_still_marks_disposed(self):
        resource = _Resource(fail=True)

        with pytest.raises(RuntimeError, match="teardown failed"):
            await resource.dispose()

        assert resource.disposed
        await resource.dispose()
        assert resource.dispose_calls == 1

    @pytest.mark.asyncio
    async def test_async_context_manager(self):
        async with _Resource() as resource:
            assert resource.lifecycle_state is LifecycleState.ACTIVE
        assert resource.disposed

    @pytest.mark.asyncio
    async def test_cannot_enter_disposed(self):
        resource = _Resource()
        await resource.dispose()

        with pytest.raises(DisposedError):
            async with resource:
                pass
