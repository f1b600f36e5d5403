"""Tests for the collaborator protocols and their injection into WebApiClient."""

import pytest

from limited_web_client import (
    LimiterProtocol,
    LimitOpts,
    LimitTokenProtocol,
    MemoryLimiter,
    WebApiClient,
    WebApiClientOpts,
    WebClient,
    WebClientProtocol,
    WebResponse,
)


class FakeToken:
    def __init__(self, log):
        self._log = log
        self._released = False

    @property
    def released(self):
        return self._released

    async def release(self):
        self._released = True
        self._log.append("release")


class FakeLimiter:
    def __init__(self):
        self.log = []
        self.acquire_timeouts = []

    async def acquire(self, timeout_ms, cancellation_token=None):
        self.acquire_timeouts.append(timeout_ms)
        self.log.append("acquire")
        return FakeToken(self.log)

    async def dispose(self):
        self.log.append("dispose")


class FakeWebClient:
    def __init__(self, log):
        self.log = log
        self.requests = []

    async def invoke(self, request, cancellation_token=None):
        self.requests.append(request)
        self.log.append("invoke")
        return WebResponse(200, "OK", {}, b'{"fake": true}')

    async def dispose(self):
        self.log.append("web_client.dispose")


class TestProtocolConformance:
    def test_web_client(self):
        assert isinstance(WebClient(), WebClientProtocol)

    @pytest.mark.asyncio
    async def test_memory_limiter_and_token(self):
        limiter = MemoryLimiter(LimitOpts(parallel=1))
        token = await limiter.acquire(timeout_ms=0)

        assert isinstance(limiter, LimiterProtocol)
        assert isinstance(token, LimitTokenProtocol)

    def test_fakes(self):
        limiter = FakeLimiter()
        assert isinstance(limiter, LimiterProtocol)
        assert isinstance(FakeWebClient(limiter.log), WebClientProtocol)
        assert isinstance(FakeToken([]), LimitTokenProtocol)


class TestInjection:
    @pytest.mark.asyncio
    async def test_injected_collaborators_drive_the_call(self):
        limiter = FakeLimiter()
        web_client = FakeWebClient(limiter.log)
        api = WebApiClient(
            WebApiClientOpts(
                url="https://api.example.com/",
                limit=limiter,
                limit_timeout_ms=1500,
                web_client=web_client,
            )
        )

        assert await api.invoke_get("status") == {"fake": True}
        await api.dispose()

        assert limiter.log == ["acquire", "invoke", "release"]
        assert limiter.acquire_timeouts == [1500]
        assert str(web_client.requests[0].url) == "https://api.example.com/status"

    @pytest.mark.asyncio
    async def test_default_limit_timeout_for_injected_limiter(self):
        limiter = FakeLimiter()
        api = WebApiClient(
            WebApiClientOpts(
                url="https://api.example.com/",
                limit=limiter,
                web_client=FakeWebClient(limiter.log),
            )
        )

        await api.invoke_get("status")

        assert limiter.acquire_timeouts == [30000.0]
