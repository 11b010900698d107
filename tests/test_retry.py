"""Tests for the retrying httpx transport."""

import httpx
import pytest

from registrygen.config import GeneratorConfig
from registrygen.retry import RetryTransport, build_client


def _sequence_transport(responses):
    """MockTransport answering with `responses` in order; records calls."""
    calls = []

    def handler(request):
        calls.append(request)
        item = responses[len(calls) - 1]
        if isinstance(item, Exception):
            raise item
        return item

    return httpx.MockTransport(handler), calls


@pytest.mark.asyncio
async def test_retries_until_success():
    inner, calls = _sequence_transport(
        [httpx.Response(503), httpx.Response(429), httpx.Response(200, json=[])]
    )
    transport = RetryTransport(inner, max_retries=3, backoff_base=0)

    async with httpx.AsyncClient(transport=transport) as client:
        resp = await client.get("https://api.example.com/x")

    assert resp.status_code == 200
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_gives_up_after_max_retries():
    """The last retryable response is returned to the caller."""
    inner, calls = _sequence_transport([httpx.Response(500) for _ in range(3)])
    transport = RetryTransport(inner, max_retries=2, backoff_base=0)

    async with httpx.AsyncClient(transport=transport) as client:
        resp = await client.get("https://api.example.com/x")

    assert resp.status_code == 500
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_does_not_retry_client_errors():
    inner, calls = _sequence_transport([httpx.Response(404)])
    transport = RetryTransport(inner, max_retries=3, backoff_base=0)

    async with httpx.AsyncClient(transport=transport) as client:
        resp = await client.get("https://api.example.com/x")

    assert resp.status_code == 404
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_retries_github_rate_limit():
    limited = httpx.Response(
        403, headers={"x-ratelimit-remaining": "0", "retry-after": "0"}
    )
    inner, calls = _sequence_transport([limited, httpx.Response(200)])
    transport = RetryTransport(inner, max_retries=1, backoff_base=0)

    async with httpx.AsyncClient(transport=transport) as client:
        resp = await client.get("https://api.example.com/x")

    assert resp.status_code == 200
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_transport_errors_retried_then_raised():
    inner, calls = _sequence_transport(
        [httpx.ConnectError("refused"), httpx.ConnectError("refused")]
    )
    transport = RetryTransport(inner, max_retries=1, backoff_base=0)

    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(httpx.ConnectError):
            await client.get("https://api.example.com/x")

    assert len(calls) == 2


def test_compute_delay_honours_retry_after_and_cap():
    transport = RetryTransport(
        httpx.MockTransport(lambda r: httpx.Response(200)),
        backoff_base=1.0,
        max_backoff=5.0,
    )
    assert transport._compute_delay(
        httpx.Response(429, headers={"retry-after": "2"}), 0
    ) == 2.0
    assert transport._compute_delay(
        httpx.Response(429, headers={"retry-after": "120"}), 0
    ) == 5.0
    # 1 * 2**4 = 16 plus jitter, capped
    assert transport._compute_delay(httpx.Response(503), 4) == 5.0


@pytest.mark.asyncio
async def test_build_client_uses_config():
    inner, calls = _sequence_transport([httpx.Response(502), httpx.Response(200)])
    config = GeneratorConfig(max_retries=1, backoff_base=0, timeout=5)

    async with build_client(
        "https://api.example.com", config, {"X-Test": "1"}, transport=inner
    ) as client:
        resp = await client.get("/ping")

    assert resp.status_code == 200
    assert calls[0].url == "https://api.example.com/ping"
    assert calls[0].headers["X-Test"] == "1"
