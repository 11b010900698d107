"""httpx transport that retries rate-limited and failed requests with backoff."""

import asyncio
import random

import httpx

from .config import GeneratorConfig

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def _parse_retry_after(headers: httpx.Headers) -> float | None:
    """Retry-After in seconds, or None if missing/unparseable."""
    raw = headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _is_rate_limited(response: httpx.Response) -> bool:
    # GitHub answers an exhausted primary rate limit with 403, not 429
    return (
        response.status_code == 403
        and response.headers.get("x-ratelimit-remaining") == "0"
    )


class RetryTransport(httpx.AsyncBaseTransport):
    """
    Wraps an httpx transport and retries up to `max_retries` times.

    Retries 429/5xx responses, GitHub rate-limit 403s and transport errors,
    waiting with exponential backoff plus jitter (or Retry-After when the
    server sends it). The final response is returned as-is; the final
    transport error is re-raised.
    """

    def __init__(
        self,
        wrapped: httpx.AsyncBaseTransport,
        *,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        max_backoff: float = 30.0,
        retryable_status_codes: frozenset[int] = RETRYABLE_STATUS,
    ) -> None:
        self._wrapped = wrapped
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._max_backoff = max_backoff
        self._retryable = retryable_status_codes

    def _should_retry(self, response: httpx.Response) -> bool:
        return response.status_code in self._retryable or _is_rate_limited(response)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        for attempt in range(1 + self._max_retries):
            try:
                response = await self._wrapped.handle_async_request(request)
            except httpx.TransportError as e:
                if attempt == self._max_retries:
                    raise
                delay = self._backoff(attempt)
                print(f"  Warning: {e!r} for {request.url}, retry in {delay:.1f}s")
                await asyncio.sleep(delay)
                continue

            if not self._should_retry(response) or attempt == self._max_retries:
                return response

            # Drain the response before retrying
            await response.aread()
            await response.aclose()

            delay = self._compute_delay(response, attempt)
            print(
                f"  Warning: HTTP {response.status_code} for {request.url}, "
                f"retry {attempt + 1}/{self._max_retries} in {delay:.1f}s"
            )
            await asyncio.sleep(delay)

        # Unreachable: the last attempt always returns or raises
        raise RuntimeError("retry loop exited without a response")

    def _backoff(self, attempt: int) -> float:
        delay = self._backoff_base * (2**attempt)
        jitter = random.uniform(0, self._backoff_base)
        return min(delay + jitter, self._max_backoff)

    def _compute_delay(self, response: httpx.Response, attempt: int) -> float:
        retry_after = _parse_retry_after(response.headers)
        if retry_after is not None:
            return min(retry_after, self._max_backoff)
        return self._backoff(attempt)

    async def aclose(self) -> None:
        await self._wrapped.aclose()


def build_client(
    base_url: str,
    config: GeneratorConfig,
    headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """AsyncClient whose requests all go through RetryTransport."""
    retrying = RetryTransport(
        transport or httpx.AsyncHTTPTransport(),
        max_retries=config.max_retries,
        backoff_base=config.backoff_base,
        max_backoff=config.max_backoff,
    )
    return httpx.AsyncClient(
        base_url=base_url,
        headers=headers,
        timeout=config.timeout,
        transport=retrying,
    )
