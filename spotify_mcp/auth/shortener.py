"""
Best-effort shortening of authorization links.

The authorization URL carries sixteen scopes and is unwieldy to copy out of
a chat transcript, so it is passed through a public shortening service. The
shortener never raises: every outcome is reported as a ShortenResult and the
caller decides what to do with a failure.
"""

from dataclasses import dataclass
from typing import Optional

import httpx
from loguru import logger

from spotify_mcp.async_client import ClientFactory


@dataclass(frozen=True)
class ShortenResult:
    """Outcome of a shortening attempt. On failure url is the original URL."""

    url: str
    shortened: bool
    error: Optional[str] = None


class LinkShortener:
    """Client for an is.gd-compatible shortening endpoint (format=simple)."""

    def __init__(self, *, endpoint: str, client_factory: ClientFactory):
        self.endpoint = endpoint
        self._client_factory = client_factory

    async def shorten(self, url: str) -> ShortenResult:
        try:
            async with self._client_factory() as client:
                response = await client.get(
                    self.endpoint,
                    params={"format": "simple", "url": url},
                )
        except httpx.HTTPError as e:
            logger.warning(f"Link shortening failed: {type(e).__name__}: {e}")
            return ShortenResult(url=url, shortened=False, error=str(e) or type(e).__name__)

        if not response.is_success:
            logger.warning(f"Link shortening returned HTTP {response.status_code}")
            return ShortenResult(
                url=url,
                shortened=False,
                error=f"HTTP {response.status_code}",
            )

        short_url = response.text.strip()
        if not short_url.startswith(("http://", "https://")):
            logger.warning(f"Link shortening returned an unexpected body: {short_url[:80]!r}")
            return ShortenResult(url=url, shortened=False, error="unexpected response body")

        return ShortenResult(url=short_url, shortened=True)
