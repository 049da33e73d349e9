"""
Authentication module for the Spotify MCP server.

OAuth2 authorization-code flow with a session-keyed, in-memory token store.
"""

from spotify_mcp.auth.token_store import (
    DEFAULT_SESSION_KEY,
    TokenStore,
)
from spotify_mcp.auth.shortener import (
    LinkShortener,
    ShortenResult,
)
from spotify_mcp.auth.authorization import (
    SCOPES,
    AuthorizationFlow,
    TokenResponse,
)

__all__ = [
    "DEFAULT_SESSION_KEY",
    "TokenStore",
    "LinkShortener",
    "ShortenResult",
    "SCOPES",
    "AuthorizationFlow",
    "TokenResponse",
]
