"""
MCP server instance and the process-wide Spotify context.

Tools and the OAuth callback route import `mcp` to register themselves and
`spotify` to reach the token store, authorization flow and API clients.
"""

from typing import Optional

from fastmcp import Context, FastMCP
from loguru import logger

from spotify_mcp.config import settings
from spotify_mcp.context import SpotifyContext
from spotify_mcp.utils.requests import SpotifyRequester
from spotify_mcp.utils.session import resolve_session_key

# Missing credentials are reported, not fatal: tools still list and the
# authorization link still renders
settings.warn_missing_credentials()

spotify = SpotifyContext.from_settings(settings)

logger.info(
    f"✓ Spotify context configured: redirect_uri={settings.redirect_uri}, "
    f"session_scoped={settings.session_scoped}"
)

mcp = FastMCP(name="Spotify")


def requester_for(ctx: Optional[Context]) -> SpotifyRequester:
    """Web API dispatcher bound to the token of the calling session."""
    return spotify.requester(resolve_session_key(ctx, spotify.settings))
