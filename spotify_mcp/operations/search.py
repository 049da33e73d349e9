"""Catalogue search."""

from typing import Any, Callable, Dict, List, Optional, Tuple

from spotify_mcp.utils.params import bound_limit, require_range
from spotify_mcp.utils.requests import SpotifyRequester, authenticated
from spotify_mcp.utils.slim import (
    slim_album,
    slim_artist,
    slim_audiobook,
    slim_episode,
    slim_paging,
    slim_playlist,
    slim_show,
    slim_track,
)

# Search type -> (response key, item projection)
SEARCH_TYPES: Dict[str, Tuple[str, Callable[[Any], Any]]] = {
    "track": ("tracks", slim_track),
    "artist": ("artists", slim_artist),
    "album": ("albums", slim_album),
    "playlist": ("playlists", slim_playlist),
    "show": ("shows", slim_show),
    "episode": ("episodes", slim_episode),
    "audiobook": ("audiobooks", slim_audiobook),
}

MAX_OFFSET = 1000


def parse_search_types(type_: str) -> List[str]:
    """Split and validate a comma-separated type list, keeping first occurrences."""
    types: List[str] = []
    for part in type_.split(","):
        name = part.strip()
        if not name:
            continue
        if name not in SEARCH_TYPES:
            raise ValueError(
                f"Unsupported search type {name!r}; expected any of {', '.join(SEARCH_TYPES)}"
            )
        if name not in types:
            types.append(name)
    if not types:
        raise ValueError("At least one search type is required")
    return types


@authenticated
async def search_items(
    api: SpotifyRequester,
    q: str,
    type_: str,
    market: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    include_external: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Search the Spotify catalogue.

    Args:
        api: Dispatcher bound to the caller's session
        q: Query string; supports Spotify field filters (artist:, year:, ...)
        type_: Comma-separated subset of track, artist, album, playlist,
            show, episode, audiobook
        market: ISO 3166-1 alpha-2 country code
        limit: Results per type, 1-50 (default 20)
        offset: Index of the first result, 0-1000
        include_external: "audio" to include externally hosted audio

    Returns:
        One slimmed paging envelope per requested type, keyed by the plural
        name ("tracks", "artists", ...)
    """
    if not q or not q.strip():
        raise ValueError("Search query must not be empty")
    types = parse_search_types(type_)
    require_range("offset", offset, 0, MAX_OFFSET)
    if include_external is not None and include_external != "audio":
        raise ValueError(f"include_external must be 'audio' (got {include_external!r})")

    data = await api.get(
        "search",
        params={
            "q": q,
            "type": ",".join(types),
            "market": market,
            "limit": bound_limit(limit),
            "offset": offset or 0,
            "include_external": include_external,
        },
        error_message="Failed to perform search",
    ) or {}

    results: Dict[str, Any] = {}
    for name in types:
        key, slim_fn = SEARCH_TYPES[name]
        results[key] = slim_paging(data.get(key), slim_fn)
    return results
