"""
In-memory Spotify access token storage.

Tokens are keyed by session key. A single-session deployment always uses
DEFAULT_SESSION_KEY; session-scoped deployments use the MCP transport
session id.

Note: This is per-process storage. Tokens do not survive a restart and
refresh tokens are not kept.
"""

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from loguru import logger

DEFAULT_SESSION_KEY = "default"

# Spotify access tokens expire one hour after issuance
DEFAULT_TOKEN_TTL_SECONDS = 3600


@dataclass
class TokenRecord:
    """An access token together with the clock reading at which it was stored."""

    access_token: str
    created_at: float


class TokenStore:
    """
    Session-keyed access token cache with a fixed time-to-live.

    Expired records are evicted lazily, the first time a read observes them.
    No locking: every mutation happens inside a single event-loop turn, and
    two writes racing on the same key resolve as last-writer-wins.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._records: Dict[str, TokenRecord] = {}

    def set_token(self, session_key: str, access_token: str) -> None:
        """Store a token under session_key, replacing any previous one."""
        self._records[session_key] = TokenRecord(
            access_token=access_token,
            created_at=self._clock(),
        )
        logger.debug(f"Stored access token for session {session_key}")

    def get_token(self, session_key: str) -> Optional[str]:
        """
        Return the live token for session_key.

        Returns:
            The access token, or None when there is no record or the record
            is older than the TTL (in which case it is removed).
        """
        record = self._records.get(session_key)
        if record is None:
            return None

        age = self._clock() - record.created_at
        if age > self.ttl_seconds:
            del self._records[session_key]
            logger.info(f"Access token for session {session_key} expired after {age:.0f}s")
            return None

        return record.access_token

    def is_authenticated(self, session_key: str) -> bool:
        return self.get_token(session_key) is not None

    def __len__(self) -> int:
        return len(self._records)
