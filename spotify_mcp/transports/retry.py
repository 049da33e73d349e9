"""
Custom httpx transport that retries transient failures.

The RetryTransport wraps another async transport and re-sends a request when
the attempt fails with a transport error (connect, read, timeout) or when
Spotify answers 429 or 5xx. Client errors such as 400/401/403/404 are
returned immediately.

POST is not idempotent (adding playlist items, skipping tracks), so a POST is
only re-sent when the first attempt provably never reached Spotify (connect
failure) or Spotify explicitly asked for a retry with 429.
"""

import asyncio
from typing import Optional

import httpx
from loguru import logger

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
NON_IDEMPOTENT_METHODS = frozenset({"POST"})


class RetryTransport(httpx.AsyncBaseTransport):
    """
    Transport with capped exponential backoff.

    Backoff schedule with the default base delay:
    - Attempt 1: immediate
    - Attempt 2: wait 0.5s
    - Attempt 3: wait 1.0s
    A Retry-After header on a 429 replaces the computed delay, capped at
    max_delay.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        *,
        max_attempts: int = 3,
        base_delay: float = 0.5,
        max_delay: float = 5.0,
    ):
        self._transport = transport or httpx.AsyncHTTPTransport()
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self.max_delay = max_delay

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        for attempt in range(1, self.max_attempts + 1):
            last_attempt = attempt == self.max_attempts

            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError as e:
                if last_attempt or not self._can_retry_error(request, e):
                    logger.error(
                        f"{request.method} {request.url.path} failed after "
                        f"{attempt} attempt(s): {type(e).__name__}: {e}"
                    )
                    raise
                delay = self._backoff(attempt)
                logger.warning(
                    f"{request.method} {request.url.path} transport error "
                    f"(attempt {attempt}/{self.max_attempts}): {type(e).__name__}. "
                    f"Retrying in {delay}s"
                )
                await asyncio.sleep(delay)
                continue

            if last_attempt or not self._can_retry_status(request, response.status_code):
                logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
                return response

            delay = self._backoff(attempt, response)
            logger.warning(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"(attempt {attempt}/{self.max_attempts}). Retrying in {delay}s"
            )
            await response.aclose()
            await asyncio.sleep(delay)

        raise RuntimeError("unreachable: retry loop exited without a result")

    @staticmethod
    def _can_retry_error(request: httpx.Request, error: httpx.TransportError) -> bool:
        if request.method in NON_IDEMPOTENT_METHODS:
            return isinstance(error, (httpx.ConnectError, httpx.ConnectTimeout))
        return True

    @staticmethod
    def _can_retry_status(request: httpx.Request, status_code: int) -> bool:
        if request.method in NON_IDEMPOTENT_METHODS:
            return status_code == 429
        return status_code in RETRYABLE_STATUS_CODES

    def _backoff(self, attempt: int, response: Optional[httpx.Response] = None) -> float:
        if response is not None and response.status_code == 429:
            retry_after = parse_retry_after(response)
            if retry_after is not None:
                return min(retry_after, self.max_delay)
        return min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)

    async def aclose(self) -> None:
        """Close the underlying transport."""
        await self._transport.aclose()


def parse_retry_after(response: httpx.Response) -> Optional[float]:
    """Return the Retry-After header in seconds, or None when absent or malformed."""
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None
