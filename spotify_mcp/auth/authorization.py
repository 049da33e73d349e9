"""
Spotify OAuth2 authorization-code flow.

1. generate_auth_link() builds the /authorize URL with the scopes this server
   needs and a fresh state nonce, remembering which session asked for it
2. The user approves in a browser; Spotify redirects to /callback
3. receive_token() checks the returned state, exchanges the code at
   /api/token and stores the access token for the originating session

State nonces are single-use and expire after state_ttl_seconds.
"""

import base64
import secrets
import string
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from urllib.parse import urlencode

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from spotify_mcp.async_client import ClientFactory
from spotify_mcp.auth.shortener import LinkShortener
from spotify_mcp.auth.token_store import DEFAULT_SESSION_KEY, TokenStore
from spotify_mcp.config import Settings

SCOPES = [
    # Spotify Connect
    "user-read-playback-state",
    "user-modify-playback-state",
    "user-read-currently-playing",
    # Playlists
    "playlist-read-private",
    "playlist-read-collaborative",
    "playlist-modify-private",
    "playlist-modify-public",
    # Follow
    "user-follow-modify",
    "user-follow-read",
    # Listening history
    "user-read-playback-position",
    "user-top-read",
    "user-read-recently-played",
    # Library
    "user-library-modify",
    "user-library-read",
    # Users
    "user-read-email",
    "user-read-private",
]

STATE_LENGTH = 16
STATE_ALPHABET = string.ascii_letters + string.digits


class TokenResponse(BaseModel):
    """Spotify /api/token response."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600
    scope: Optional[str] = None
    refresh_token: Optional[str] = None


@dataclass
class PendingAuthorization:
    """An issued state nonce awaiting its callback."""

    session_key: str
    created_at: float


def generate_state(length: int = STATE_LENGTH) -> str:
    """Random alphanumeric nonce for the OAuth state parameter."""
    return "".join(secrets.choice(STATE_ALPHABET) for _ in range(length))


def basic_auth_header(client_id: str, client_secret: str) -> str:
    raw = f"{client_id}:{client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


class AuthorizationFlow:
    """
    Owns the authorization-code exchange and the only writes to the TokenStore.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        token_store: TokenStore,
        shortener: Optional[LinkShortener],
        client_factory: ClientFactory,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings
        self.token_store = token_store
        self.shortener = shortener
        self._client_factory = client_factory
        self._clock = clock
        self._pending: Dict[str, PendingAuthorization] = {}

    def build_authorize_url(self, state: str) -> str:
        query = urlencode(
            {
                "response_type": "code",
                "client_id": self.settings.client_id,
                "scope": " ".join(SCOPES),
                "redirect_uri": self.settings.redirect_uri,
                "state": state,
            }
        )
        return f"{self.settings.authorize_url}?{query}"

    async def generate_auth_link(self, session_key: str = DEFAULT_SESSION_KEY) -> str:
        """
        Build the authorization link for session_key.

        The link is shortened when possible; any shortening failure falls back
        to the full Spotify URL. Never raises.

        Returns:
            URL the user must open to grant access
        """
        self._discard_expired_states()

        state = generate_state()
        self._pending[state] = PendingAuthorization(
            session_key=session_key,
            created_at=self._clock(),
        )
        auth_url = self.build_authorize_url(state)
        logger.info(f"Issued authorization link for session {session_key}")

        if self.shortener is None:
            return auth_url

        result = await self.shortener.shorten(auth_url)
        if not result.shortened:
            logger.warning(f"Using full authorization URL (shortening failed: {result.error})")
            return auth_url
        return result.url

    async def receive_token(self, code: str, state: str) -> bool:
        """
        Exchange an authorization code for an access token.

        Args:
            code: Authorization code from the callback
            state: State nonce from the callback

        Returns:
            True when a token was stored, False on any failure (unknown state,
            non-2xx response, malformed body or transport error)
        """
        session_key = self._resolve_state(state)
        if session_key is None:
            return False

        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.settings.redirect_uri,
        }
        headers = {
            "Authorization": basic_auth_header(
                self.settings.client_id, self.settings.client_secret
            ),
            "Content-Type": "application/x-www-form-urlencoded",
        }

        try:
            async with self._client_factory() as client:
                response = await client.post(self.settings.token_url, data=data, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Token exchange failed: {type(e).__name__}: {e}")
            return False

        if not response.is_success:
            logger.error(
                f"Token exchange rejected: HTTP {response.status_code} {response.text[:200]}"
            )
            return False

        try:
            token = TokenResponse(**response.json())
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Token exchange returned an unusable body: {e}")
            return False

        self.token_store.set_token(session_key, token.access_token)
        logger.success(f"✓ Authenticated with Spotify (session {session_key})")
        return True

    def is_authenticated(self, session_key: str = DEFAULT_SESSION_KEY) -> bool:
        return self.token_store.is_authenticated(session_key)

    def accepts_state(self, state: str) -> bool:
        """Whether receive_token would accept state. Does not consume it."""
        self._discard_expired_states()
        return state in self._pending or not self.settings.verify_state

    def _resolve_state(self, state: str) -> Optional[str]:
        """Consume a pending state and return its session key."""
        self._discard_expired_states()
        pending = self._pending.pop(state, None)
        if pending is not None:
            return pending.session_key

        if self.settings.verify_state:
            logger.warning("Rejected authorization callback with unknown or expired state")
            return None

        return DEFAULT_SESSION_KEY

    def _discard_expired_states(self) -> None:
        now = self._clock()
        expired = [
            state
            for state, pending in self._pending.items()
            if now - pending.created_at > self.settings.state_ttl_seconds
        ]
        for state in expired:
            del self._pending[state]

    @property
    def pending_count(self) -> int:
        return len(self._pending)
