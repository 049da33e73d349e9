"""
Application context wiring the authentication core together.

One SpotifyContext holds the token store, the authorization flow and the
HTTP client factories for a process. The server builds a single instance at
startup; tests build as many independent instances as they need.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from spotify_mcp.async_client import ClientFactory, client_factory
from spotify_mcp.auth import (
    DEFAULT_SESSION_KEY,
    AuthorizationFlow,
    LinkShortener,
    TokenStore,
)
from spotify_mcp.config import Settings
from spotify_mcp.utils.requests import SpotifyRequester


@dataclass
class SpotifyContext:
    settings: Settings
    token_store: TokenStore
    auth_flow: AuthorizationFlow
    api_client_factory: ClientFactory

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        api_client_factory: Optional[ClientFactory] = None,
        auth_client_factory: Optional[ClientFactory] = None,
        shortener_client_factory: Optional[ClientFactory] = None,
        token_store: Optional[TokenStore] = None,
    ) -> "SpotifyContext":
        """
        Build a context from settings.

        Factories default to real httpx clients: the Web API factory retries
        transient failures, the token exchange and shortener factories make a
        single attempt each.
        """
        if api_client_factory is None:
            api_client_factory = client_factory(
                timeout=settings.request_timeout_seconds,
                max_attempts=settings.max_retries,
            )
        if auth_client_factory is None:
            auth_client_factory = client_factory(timeout=settings.request_timeout_seconds)
        if shortener_client_factory is None:
            shortener_client_factory = client_factory(
                timeout=settings.shortener_timeout_seconds
            )
        if token_store is None:
            token_store = TokenStore(ttl_seconds=settings.token_ttl_seconds)

        shortener = None
        if settings.shorten_links:
            shortener = LinkShortener(
                endpoint=settings.shortener_url,
                client_factory=shortener_client_factory,
            )

        auth_flow = AuthorizationFlow(
            settings=settings,
            token_store=token_store,
            shortener=shortener,
            client_factory=auth_client_factory,
        )

        logger.debug(
            f"SpotifyContext initialized: api={settings.api_base_url}, "
            f"session_scoped={settings.session_scoped}, shorten_links={settings.shorten_links}"
        )

        return cls(
            settings=settings,
            token_store=token_store,
            auth_flow=auth_flow,
            api_client_factory=api_client_factory,
        )

    def requester(self, session_key: str = DEFAULT_SESSION_KEY) -> SpotifyRequester:
        """Return a dispatcher bound to session_key."""
        return SpotifyRequester(
            token_store=self.token_store,
            session_key=session_key,
            api_base_url=self.settings.api_base_url,
            client_factory=self.api_client_factory,
        )
