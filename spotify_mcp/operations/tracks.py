"""Track catalogue and saved-tracks library operations."""

from typing import Any, Dict, List, Optional

from loguru import logger

from spotify_mcp.utils.params import bound_limit, join_ids, require_max_items, split_ids
from spotify_mcp.utils.requests import SpotifyRequester, authenticated, path_segment
from spotify_mcp.utils.slim import slim_paging, slim_saved_track, slim_track

MAX_IDS_PER_REQUEST = 50


def _ids(ids: str) -> List[str]:
    parsed = split_ids(ids)
    require_max_items(parsed, MAX_IDS_PER_REQUEST, "track ids")
    return parsed


@authenticated
async def get_track(
    api: SpotifyRequester,
    track_id: str,
    market: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    data = await api.get(
        f"tracks/{path_segment(track_id)}",
        params={"market": market},
        error_message="Failed to fetch track",
    )
    return slim_track(data)


@authenticated
async def get_several_tracks(
    api: SpotifyRequester,
    ids: str,
    market: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Fetch up to 50 tracks by comma-separated ids.

    Unknown ids come back as None in their position.
    """
    parsed = _ids(ids)
    data = await api.get(
        "tracks",
        params={"ids": join_ids(parsed), "market": market},
        error_message="Failed to fetch tracks",
    ) or {}
    return {"tracks": [slim_track(t) for t in data.get("tracks") or []]}


@authenticated
async def get_saved_tracks(
    api: SpotifyRequester,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    market: Optional[str] = None,
) -> Dict[str, Any]:
    data = await api.get(
        "me/tracks",
        params={"limit": bound_limit(limit), "offset": offset or 0, "market": market},
        error_message="Failed to fetch saved tracks",
    )
    return slim_paging(data or {}, slim_saved_track)


@authenticated
async def save_tracks(api: SpotifyRequester, ids: str) -> Dict[str, Any]:
    parsed = _ids(ids)
    logger.info(f"Saving {len(parsed)} track(s) to library")
    await api.put("me/tracks", json={"ids": parsed}, error_message="Failed to save tracks")
    return {"success": True}


@authenticated
async def remove_saved_tracks(api: SpotifyRequester, ids: str) -> Dict[str, Any]:
    parsed = _ids(ids)
    logger.info(f"Removing {len(parsed)} track(s) from library")
    await api.delete(
        "me/tracks",
        json={"ids": parsed},
        error_message="Failed to remove saved tracks",
    )
    return {"success": True}


@authenticated
async def check_saved_tracks(api: SpotifyRequester, ids: str) -> List[bool]:
    """
    Whether each track is in the user's library.

    Returns:
        One boolean per id, aligned to input order
    """
    parsed = _ids(ids)
    data = await api.get(
        "me/tracks/contains",
        params={"ids": join_ids(parsed)},
        error_message="Failed to check saved tracks",
    )
    return list(data or [])
