"""
Tests for the OAuth callback endpoint.
"""

import httpx
import pytest

from spotify_mcp import callback, mcp_instance
from spotify_mcp.callback import complete_authorization


def token_ok(request):
    return httpx.Response(200, json={"access_token": "abc123"})


@pytest.fixture
def unverified(test_settings):
    return test_settings.model_copy(update={"verify_state": False})


class TestCompleteAuthorization:
    @pytest.mark.asyncio
    async def test_success(self, make_context, unverified):
        context, _, _ = make_context(accounts=token_ok, settings=unverified)

        body, status = await complete_authorization(context.auth_flow, "validcode", "xyz")

        assert status == 200
        assert body == "Authentication successful! You can close this window."
        assert context.auth_flow.is_authenticated()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code,state", [(None, "xyz"), ("code", None), ("", "")])
    async def test_missing_parameters(self, make_context, code, state):
        context, _, accounts = make_context(accounts=token_ok)

        body, status = await complete_authorization(context.auth_flow, code, state)

        assert status == 400
        assert body == "Missing code or state in callback"
        assert accounts.call_count == 0

    @pytest.mark.asyncio
    async def test_provider_error(self, make_context):
        context, _, accounts = make_context(accounts=token_ok)

        body, status = await complete_authorization(context.auth_flow, None, "xyz", error="access_denied")

        assert status == 400
        assert "access_denied" in body
        assert accounts.call_count == 0

    @pytest.mark.asyncio
    async def test_exchange_failure(self, make_context, unverified):
        context, _, accounts = make_context(
            accounts=lambda request: httpx.Response(400, json={"error": "invalid_grant"}),
            settings=unverified,
        )

        body, status = await complete_authorization(context.auth_flow, "badcode", "xyz")

        assert status == 500
        assert body == "Failed to retrieve access token"
        assert accounts.call_count == 1
        assert not context.auth_flow.is_authenticated()

    @pytest.mark.asyncio
    async def test_unknown_state_rejected_without_exchange(self, make_context):
        context, _, accounts = make_context(accounts=token_ok)

        body, status = await complete_authorization(context.auth_flow, "validcode", "xyz")

        assert status == 400
        assert body == "Invalid or expired state"
        assert accounts.call_count == 0
        assert not context.auth_flow.is_authenticated()


class TestCallbackRoute:
    @pytest.mark.asyncio
    async def test_route_completes_flow(self, make_context, monkeypatch):
        context, _, _ = make_context(accounts=token_ok)
        monkeypatch.setattr(mcp_instance, "spotify", context)
        link = await context.auth_flow.generate_auth_link()
        state = httpx.URL(link).params["state"]

        app = callback.mcp.http_app()
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/callback", params={"code": "validcode", "state": state})

        assert response.status_code == 200
        assert response.text == "Authentication successful! You can close this window."
        assert context.token_store.get_token("default") == "abc123"

    @pytest.mark.asyncio
    async def test_route_rejects_missing_code(self, make_context, monkeypatch):
        context, _, _ = make_context()
        monkeypatch.setattr(mcp_instance, "spotify", context)

        app = callback.mcp.http_app()
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/callback", params={"state": "xyz"})

        assert response.status_code == 400
        assert response.text == "Missing code or state in callback"

    @pytest.mark.asyncio
    async def test_route_rejects_unknown_state(self, make_context, monkeypatch):
        context, _, accounts = make_context(accounts=token_ok)
        monkeypatch.setattr(mcp_instance, "spotify", context)

        app = callback.mcp.http_app()
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/callback", params={"code": "validcode", "state": "forged"})

        assert response.status_code == 400
        assert response.text == "Invalid or expired state"
        assert accounts.call_count == 0
