"""
Async HTTP client factories for calling Spotify.

Components never construct httpx clients directly; they receive a
ClientFactory and use it as a context manager. Production factories attach
RetryTransport and a bounded timeout, tests pass factories built on
httpx.MockTransport.
"""

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncGenerator, Callable, Optional

import httpx
from loguru import logger

from spotify_mcp.transports.retry import RetryTransport

ClientFactory = Callable[[], AsyncContextManager[httpx.AsyncClient]]


def client_factory(
    *,
    timeout: float = 10.0,
    max_attempts: int = 1,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ClientFactory:
    """
    Build a factory yielding configured AsyncClients.

    Args:
        timeout: Per-request timeout in seconds (connect, read, write, pool)
        max_attempts: Total attempts per request; 1 disables retries
        transport: Inner transport to wrap (defaults to AsyncHTTPTransport)

    Usage:
        factory = client_factory(timeout=10.0, max_attempts=3)
        async with factory() as client:
            response = await client.get("https://api.spotify.com/v1/me")
    """
    logger.debug(f"Client factory configured: timeout={timeout}s, max_attempts={max_attempts}")

    @asynccontextmanager
    async def get_client() -> AsyncGenerator[httpx.AsyncClient, None]:
        async with httpx.AsyncClient(
            transport=RetryTransport(transport, max_attempts=max_attempts),
            timeout=httpx.Timeout(timeout),
        ) as client:
            yield client

    return get_client
