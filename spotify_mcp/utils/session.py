"""
Session key resolution for MCP tool requests.

By default the server keeps one token for the whole process: every tool call
and every authorization link share DEFAULT_SESSION_KEY, so a user who signs
in once is signed in for all clients.

With SPOTIFY_SESSION_SCOPED enabled, the token is keyed by the MCP transport
session id instead. Each connected client then signs in separately. Calls
without a transport session (stdio, direct invocation) fall back to the
shared key.
"""

from typing import Optional

from fastmcp import Context
from loguru import logger

from spotify_mcp.auth import DEFAULT_SESSION_KEY
from spotify_mcp.config import Settings


def resolve_session_key(ctx: Optional[Context], settings: Settings) -> str:
    """
    Return the token-store key for the current tool call.

    Args:
        ctx: FastMCP request context, or None outside a request
        settings: Settings deciding whether tokens are session scoped

    Returns:
        The MCP session id in session-scoped mode, else DEFAULT_SESSION_KEY
    """
    if not settings.session_scoped or ctx is None:
        return DEFAULT_SESSION_KEY

    session_id = ctx.session_id
    if not session_id:
        logger.debug("No MCP session id on request; using shared token slot")
        return DEFAULT_SESSION_KEY
    return session_id
