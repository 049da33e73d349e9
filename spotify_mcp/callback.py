"""
OAuth redirect endpoint.

Spotify sends the browser to GET /callback?code=...&state=... after the user
approves (or ?error=...&state=... when they decline). The handler completes
the authorization-code exchange and answers with a short plain-text page.
"""

from typing import Optional, Tuple

from loguru import logger
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from spotify_mcp import mcp_instance
from spotify_mcp.auth import AuthorizationFlow
from spotify_mcp.mcp_instance import mcp

SUCCESS_MESSAGE = "Authentication successful! You can close this window."
MISSING_PARAMS_MESSAGE = "Missing code or state in callback"
EXCHANGE_FAILED_MESSAGE = "Failed to retrieve access token"
INVALID_STATE_MESSAGE = "Invalid or expired state"


async def complete_authorization(
    flow: AuthorizationFlow,
    code: Optional[str],
    state: Optional[str],
    error: Optional[str] = None,
) -> Tuple[str, int]:
    """
    Finish an authorization attempt and return (body, status) for the browser.

    The exchange is attempted once; there is no retry.
    """
    if error:
        logger.warning(f"Spotify authorization denied: {error}")
        return f"Authorization failed: {error}", 400
    if not code or not state:
        logger.warning("Callback missing code or state")
        return MISSING_PARAMS_MESSAGE, 400
    if not flow.accepts_state(state):
        logger.warning("Callback state is unknown or expired")
        return INVALID_STATE_MESSAGE, 400

    if await flow.receive_token(code, state):
        return SUCCESS_MESSAGE, 200
    return EXCHANGE_FAILED_MESSAGE, 500


@mcp.custom_route("/callback", methods=["GET"])
async def oauth_callback(request: Request) -> PlainTextResponse:
    params = request.query_params
    body, status = await complete_authorization(
        mcp_instance.spotify.auth_flow,
        params.get("code"),
        params.get("state"),
        params.get("error"),
    )
    return PlainTextResponse(body, status_code=status)
