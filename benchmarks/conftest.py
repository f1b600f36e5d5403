"""
Shared fixtures for benchmark tests.
"""

import httpx
import pytest

from limited_web_client import (
    LimitConfig,
    LimitOpts,
    WebApiClient,
    WebApiClientOpts,
    WebClient,
)


def instant_handler(request: httpx.Request) -> httpx.Response:
    """Answer every request immediately with a small JSON body."""
    return httpx.Response(200, content=b'{"ok": true}')


@pytest.fixture
def benchmark_limit():
    """Quota high enough that benchmarks measure overhead, not waiting."""
    return LimitConfig(
        LimitOpts(per_second=1_000_000, per_minute=10_000_000, parallel=1000),
        timeout_ms=30_000,
    )


@pytest.fixture
async def web_client():
    """WebClient backed by an in-memory transport."""
    client = WebClient(transport=httpx.MockTransport(instant_handler))
    yield client
    await client.dispose()


@pytest.fixture
async def api_client(web_client, benchmark_limit):
    """WebApiClient with a high quota and an in-memory transport."""
    api = WebApiClient(
        WebApiClientOpts(
            url="https://benchmark.test/api/",
            limit=benchmark_limit,
            web_client=web_client,
        )
    )
    yield api
    await api.dispose()
