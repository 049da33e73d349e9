"""
HTTP request helpers for calling the Spotify Web API on behalf of a session.

Every call to api.spotify.com goes through SpotifyRequester.request():
1. Look up the session's access token (fail fast when there is none)
2. Attach Authorization: Bearer <token> and a JSON content type
3. Send the request through the retrying client
4. Return the parsed body, None for 204/empty, or raise a SpotifyApiError

This is the only module that knows the API base URL and how tokens are
attached.
"""

import functools
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar
from urllib.parse import quote

import httpx
from loguru import logger

from spotify_mcp.async_client import ClientFactory
from spotify_mcp.auth.token_store import TokenStore
from spotify_mcp.transports.retry import parse_retry_after


class SpotifyApiError(Exception):
    """Raised when a Spotify API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotAuthenticatedError(SpotifyApiError):
    """Raised before any network call when the session has no live token."""

    def __init__(self, message: str = "User is not authenticated. Use get-auth-link to sign in to Spotify."):
        super().__init__(message)


class BadRequestError(SpotifyApiError):
    pass


class InvalidTokenError(SpotifyApiError):
    """Spotify rejected the access token (expired or revoked)."""

    pass


class PermissionDeniedError(SpotifyApiError):
    pass


class ResourceNotFoundError(SpotifyApiError):
    pass


class RateLimitedError(SpotifyApiError):
    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class SpotifyTransportError(SpotifyApiError):
    """Network-level failure (DNS, connect, timeout, reset). Retrying may help."""

    pass


def extract_error_message(response: httpx.Response) -> Optional[str]:
    """
    Pull the human-readable reason out of an error response.

    Handles both envelopes Spotify uses:
    - Web API: {"error": {"status": 403, "message": "..."}}
    - Accounts: {"error": "invalid_grant", "error_description": "..."}
    """
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return message or None
    description = body.get("error_description")
    if description:
        return description
    if isinstance(error, str) and error:
        return error
    return None


def raise_for_spotify_status(response: httpx.Response, fallback: str) -> None:
    """Map a non-2xx Spotify response onto the SpotifyApiError hierarchy."""
    if response.is_success:
        return

    status = response.status_code
    detail = extract_error_message(response) or fallback

    if status == 400:
        raise BadRequestError(f"Bad request: {detail}", status_code=status)
    if status == 401:
        raise InvalidTokenError(
            f"Spotify access token is invalid or expired ({detail}). "
            "Use get-auth-link to re-authenticate.",
            status_code=status,
        )
    if status == 403:
        raise PermissionDeniedError(f"Permission denied: {detail}", status_code=status)
    if status == 404:
        raise ResourceNotFoundError(f"Not found: {detail}", status_code=status)
    if status == 429:
        raise RateLimitedError(
            f"Rate limited by Spotify: {detail}",
            retry_after=parse_retry_after(response),
        )
    raise SpotifyApiError(f"{detail} (HTTP {status})", status_code=status)


def path_segment(value: str) -> str:
    """
    Percent-encode a caller-supplied id for use as one URL path segment.

    Slashes, "?" and "#" are escaped so an id can never leave the
    resource it names. Dot segments are rejected outright.
    """
    if value in ("", ".", ".."):
        raise ValueError(f"Invalid Spotify id: {value!r}")
    return quote(value, safe="")


Operation = TypeVar("Operation", bound=Callable[..., Awaitable[Any]])


def authenticated(fn: Operation) -> Operation:
    """
    Fail with NotAuthenticatedError before the operation validates anything.

    Applied to every operation so a signed-out session always gets the
    sign-in hint, whatever else is wrong with the arguments.
    """

    @functools.wraps(fn)
    async def wrapper(api: "SpotifyRequester", *args: Any, **kwargs: Any) -> Any:
        if not api.token_store.is_authenticated(api.session_key):
            raise NotAuthenticatedError()
        return await fn(api, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class SpotifyRequester:
    """
    Authenticated dispatcher bound to one session key.

    Instances are cheap; SpotifyContext.requester() builds one per tool call.
    """

    def __init__(
        self,
        *,
        token_store: TokenStore,
        session_key: str,
        api_base_url: str,
        client_factory: ClientFactory,
    ):
        self.token_store = token_store
        self.session_key = session_key
        self.api_base_url = api_base_url.rstrip("/")
        self._client_factory = client_factory

    def url_for(self, path: str) -> str:
        return f"{self.api_base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        error_message: Optional[str] = None,
    ) -> Optional[Any]:
        """
        Make an authenticated request to the Spotify Web API.

        Args:
            method: HTTP verb
            path: Path below the API base (e.g., "me/player")
            params: Query parameters; None values are dropped
            json: JSON request body
            headers: Extra headers, merged over the defaults
            error_message: Fallback error text when Spotify gives no reason

        Returns:
            Parsed JSON body, or None for 204 No Content / an empty body

        Raises:
            NotAuthenticatedError: No live token for this session (no request made)
            SpotifyTransportError: Network failure or timeout
            SpotifyApiError: Any non-2xx response (see raise_for_spotify_status)
        """
        token = self.token_store.get_token(self.session_key)
        if token is None:
            raise NotAuthenticatedError()

        request_headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        if headers:
            request_headers.update(headers)

        query = None
        if params:
            query = {key: value for key, value in params.items() if value is not None}

        fallback = error_message or "An API error occurred"

        logger.debug(f"{method} {path} params={query}")
        try:
            async with self._client_factory() as client:
                response = await client.request(
                    method,
                    self.url_for(path),
                    params=query,
                    json=json,
                    headers=request_headers,
                )
        except httpx.TimeoutException as e:
            raise SpotifyTransportError(f"{fallback}: request timed out") from e
        except httpx.HTTPError as e:
            raise SpotifyTransportError(f"{fallback}: {type(e).__name__}: {e}") from e

        if response.is_success:
            logger.debug(f"{method} {path} -> {response.status_code}")
        else:
            logger.warning(f"{method} {path} -> {response.status_code}")
        raise_for_spotify_status(response, fallback)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            # Some player endpoints answer 200 with a non-JSON body (snapshot text)
            logger.debug(f"{method} {path} returned a non-JSON body")
            return None

    async def get(self, path: str, **kwargs: Any) -> Optional[Any]:
        return await self.request("GET", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Optional[Any]:
        return await self.request("PUT", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Optional[Any]:
        return await self.request("POST", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Optional[Any]:
        return await self.request("DELETE", path, **kwargs)
