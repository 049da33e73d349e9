"""
MCP tools for Spotify sign-in.
"""

from typing import Dict

from fastmcp import Context
from loguru import logger

from spotify_mcp import mcp_instance
from spotify_mcp.mcp_instance import mcp
from spotify_mcp.utils.session import resolve_session_key


@mcp.tool(name="is-authenticated")
async def is_authenticated(ctx: Context) -> Dict[str, bool]:
    """
    Check whether the user is signed in to Spotify.

    Returns:
        {"isAuthenticated": bool}
    """
    spotify = mcp_instance.spotify
    session_key = resolve_session_key(ctx, spotify.settings)
    return {"isAuthenticated": spotify.auth_flow.is_authenticated(session_key)}


@mcp.tool(name="get-auth-link")
async def get_auth_link(ctx: Context) -> Dict[str, str]:
    """
    Get a link the user opens in a browser to sign in to Spotify.

    After approving access the browser is redirected back to this server and
    the other tools become usable. Links are single-use and expire after ten
    minutes.

    Returns:
        {"authLink": url}
    """
    spotify = mcp_instance.spotify
    session_key = resolve_session_key(ctx, spotify.settings)
    link = await spotify.auth_flow.generate_auth_link(session_key)
    logger.info("Issued Spotify authorization link")
    return {"authLink": link}
