"""
Tests for the Spotify authorization-code flow.

These tests ensure:
1. Authorization links are well formed with or without shortening
2. Successful exchanges store the token for the originating session
3. Failed exchanges leave the session unauthenticated
4. State nonces are single-use and expire
"""

import base64
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from spotify_mcp.auth import SCOPES, AuthorizationFlow, LinkShortener, TokenStore
from spotify_mcp.auth.authorization import basic_auth_header, generate_state

from conftest import MockSpotify, unreachable


def token_ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"access_token": "abc123", "token_type": "Bearer", "expires_in": 3600})


def make_flow(settings, clock, accounts=unreachable, shortener=None):
    accounts_mock = MockSpotify(accounts)
    flow = AuthorizationFlow(
        settings=settings,
        token_store=TokenStore(ttl_seconds=settings.token_ttl_seconds, clock=clock),
        shortener=shortener,
        client_factory=accounts_mock.factory(),
        clock=clock,
    )
    return flow, accounts_mock


def state_of(url: str) -> str:
    return parse_qs(urlparse(url).query)["state"][0]


class TestGenerateState:
    def test_alphanumeric_of_fixed_length(self):
        state = generate_state()

        assert len(state) == 16
        assert state.isalnum()

    def test_states_differ(self):
        assert generate_state() != generate_state()


def test_basic_auth_header():
    header = basic_auth_header("id", "secret")

    assert header == "Basic " + base64.b64encode(b"id:secret").decode("ascii")


class TestGenerateAuthLink:
    """Tests for authorization link construction."""

    @pytest.mark.asyncio
    async def test_link_is_well_formed(self, test_settings, clock):
        flow, _ = make_flow(test_settings, clock)

        link = await flow.generate_auth_link()

        parsed = urlparse(link)
        query = parse_qs(parsed.query)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://accounts.spotify.com/authorize"
        assert query["response_type"] == ["code"]
        assert query["client_id"] == ["test-client-id"]
        assert query["redirect_uri"] == ["http://127.0.0.1:3000/callback"]
        assert query["scope"][0].split(" ") == SCOPES
        assert len(query["state"][0]) == 16
        assert flow.pending_count == 1

    @pytest.mark.asyncio
    async def test_shortened_link_is_returned(self, test_settings, clock):
        shortener_mock = MockSpotify(lambda request: httpx.Response(200, text="https://is.gd/abc\n"))
        shortener = LinkShortener(
            endpoint="https://is.gd/create.php",
            client_factory=shortener_mock.factory(),
        )
        flow, _ = make_flow(test_settings, clock, shortener=shortener)

        link = await flow.generate_auth_link()

        assert link == "https://is.gd/abc"
        params = shortener_mock.last_request.url.params
        assert params["format"] == "simple"
        assert params["url"].startswith("https://accounts.spotify.com/authorize?")

    @pytest.mark.asyncio
    async def test_shortener_failure_falls_back_to_full_url(self, test_settings, clock):
        def broken(request):
            raise httpx.ConnectError("name resolution failed")

        shortener = LinkShortener(
            endpoint="https://is.gd/create.php",
            client_factory=MockSpotify(broken).factory(),
        )
        flow, _ = make_flow(test_settings, clock, shortener=shortener)

        link = await flow.generate_auth_link()

        assert link.startswith("https://accounts.spotify.com/authorize?")
        assert "client_id=test-client-id" in link
        assert "response_type=code" in link


class TestReceiveToken:
    """Tests for the code-for-token exchange."""

    @pytest.mark.asyncio
    async def test_successful_round_trip(self, test_settings, clock):
        flow, accounts = make_flow(test_settings, clock, accounts=token_ok)
        link = await flow.generate_auth_link("session-1")

        ok = await flow.receive_token("validcode", state_of(link))

        assert ok is True
        assert flow.token_store.get_token("session-1") == "abc123"
        assert flow.is_authenticated("session-1")

        request = accounts.last_request
        assert request.method == "POST"
        assert str(request.url) == "https://accounts.spotify.com/api/token"
        assert request.headers["Authorization"] == basic_auth_header("test-client-id", "test-client-secret")
        form = parse_qs(request.content.decode())
        assert form == {
            "grant_type": ["authorization_code"],
            "code": ["validcode"],
            "redirect_uri": ["http://127.0.0.1:3000/callback"],
        }

    @pytest.mark.asyncio
    async def test_unverified_state_uses_default_session(self, test_settings, clock):
        settings = test_settings.model_copy(update={"verify_state": False})
        flow, _ = make_flow(settings, clock, accounts=token_ok)

        ok = await flow.receive_token("validcode", "xyz")

        assert ok is True
        assert flow.is_authenticated()

    @pytest.mark.asyncio
    async def test_rejected_exchange_returns_false(self, test_settings, clock):
        flow, _ = make_flow(
            test_settings,
            clock,
            accounts=lambda request: httpx.Response(400, json={"error": "invalid_grant"}),
        )
        link = await flow.generate_auth_link()

        ok = await flow.receive_token("badcode", state_of(link))

        assert ok is False
        assert not flow.is_authenticated()

    @pytest.mark.asyncio
    async def test_transport_failure_returns_false(self, test_settings, clock):
        def down(request):
            raise httpx.ConnectTimeout("timed out")

        flow, _ = make_flow(test_settings, clock, accounts=down)
        link = await flow.generate_auth_link()

        assert await flow.receive_token("code", state_of(link)) is False
        assert not flow.is_authenticated()

    @pytest.mark.asyncio
    async def test_body_without_access_token_returns_false(self, test_settings, clock):
        flow, _ = make_flow(
            test_settings, clock, accounts=lambda request: httpx.Response(200, json={"token_type": "Bearer"})
        )
        link = await flow.generate_auth_link()

        assert await flow.receive_token("code", state_of(link)) is False
        assert not flow.is_authenticated()


class TestStateVerification:
    """State nonces are single-use and expire."""

    @pytest.mark.asyncio
    async def test_unknown_state_rejected_without_request(self, test_settings, clock):
        flow, accounts = make_flow(test_settings, clock, accounts=token_ok)

        assert await flow.receive_token("validcode", "xyz") is False
        assert accounts.call_count == 0
        assert not flow.is_authenticated()

    @pytest.mark.asyncio
    async def test_replayed_state_rejected(self, test_settings, clock):
        flow, accounts = make_flow(test_settings, clock, accounts=token_ok)
        state = state_of(await flow.generate_auth_link())

        assert await flow.receive_token("validcode", state) is True
        assert await flow.receive_token("validcode", state) is False
        assert accounts.call_count == 1

    @pytest.mark.asyncio
    async def test_expired_state_rejected(self, test_settings, clock):
        flow, accounts = make_flow(test_settings, clock, accounts=token_ok)
        state = state_of(await flow.generate_auth_link())

        clock.advance(test_settings.state_ttl_seconds + 1)

        assert await flow.receive_token("validcode", state) is False
        assert accounts.call_count == 0
        assert flow.pending_count == 0


class TestAcceptsState:
    @pytest.mark.asyncio
    async def test_pending_state_accepted_and_not_consumed(self, test_settings, clock):
        flow, accounts = make_flow(test_settings, clock, accounts=token_ok)
        state = state_of(await flow.generate_auth_link())

        assert flow.accepts_state(state)
        assert flow.pending_count == 1
        assert await flow.receive_token("validcode", state) is True
        assert not flow.accepts_state(state)

    @pytest.mark.asyncio
    async def test_expired_state_refused(self, test_settings, clock):
        flow, _ = make_flow(test_settings, clock)
        state = state_of(await flow.generate_auth_link())

        clock.advance(test_settings.state_ttl_seconds + 1)

        assert not flow.accepts_state(state)

    def test_any_state_accepted_without_verification(self, test_settings, clock):
        settings = test_settings.model_copy(update={"verify_state": False})
        flow, _ = make_flow(settings, clock)

        assert flow.accepts_state("anything")
