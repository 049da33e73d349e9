"""
Pytest configuration and fixtures for spotify_mcp tests.

Sets deterministic environment variables before any spotify_mcp imports and
provides httpx.MockTransport based client factories so no test touches the
network.
"""

import os

# Set environment variables BEFORE any spotify_mcp imports
# Config uses SPOTIFY_ prefix (see config.py model_config)
os.environ.setdefault("SPOTIFY_CLIENT_ID", "test-client-id")
os.environ.setdefault("SPOTIFY_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:3000/callback")
os.environ.setdefault("SPOTIFY_SHORTEN_LINKS", "false")

from typing import Callable, List  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402

from spotify_mcp.async_client import ClientFactory, client_factory  # noqa: E402
from spotify_mcp.config import Settings  # noqa: E402
from spotify_mcp.context import SpotifyContext  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockSpotify:
    """
    Records every request and answers with a user-supplied handler.

    Usage:
        mock = MockSpotify(lambda request: httpx.Response(200, json={...}))
        factory = mock.factory()
        ...
        assert mock.call_count == 1
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def factory(self, max_attempts: int = 1) -> ClientFactory:
        return client_factory(
            timeout=5.0,
            max_attempts=max_attempts,
            transport=httpx.MockTransport(self._handle),
        )


def unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request: {request.method} {request.url}")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    """Settings isolated from the process environment file."""
    return Settings(
        _env_file=None,
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri="http://127.0.0.1:3000/callback",
        shorten_links=False,
    )


@pytest.fixture
def make_context(test_settings):
    """Build a SpotifyContext whose Web API and accounts calls go to mocks."""

    def _make(
        api: Callable[[httpx.Request], httpx.Response] = unreachable,
        accounts: Callable[[httpx.Request], httpx.Response] = unreachable,
        settings: Settings = None,
    ):
        api_mock = MockSpotify(api)
        accounts_mock = MockSpotify(accounts)
        context = SpotifyContext.from_settings(
            settings or test_settings,
            api_client_factory=api_mock.factory(),
            auth_client_factory=accounts_mock.factory(),
        )
        return context, api_mock, accounts_mock

    return _make


@pytest.fixture
def api_mock_with_token(make_context):
    """
    Return a helper producing (requester, mock) for an authenticated session.

    The handler answers every Web API request.
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response]):
        context, api_mock, _ = make_context(api=handler)
        context.token_store.set_token("default", "test-token")
        return context.requester(), api_mock

    return _make
