"""
Playlist operations.

Mutating calls need the playlist-modify scopes and, for most of them, that
the current user owns (or collaborates on) the playlist. Spotify answers 403
otherwise, surfaced as PermissionDeniedError.
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from spotify_mcp.utils.params import bound_limit, join_ids, require_max_items, require_range
from spotify_mcp.utils.requests import SpotifyRequester, authenticated, path_segment
from spotify_mcp.utils.slim import slim_paging, slim_playlist, slim_playlist_track

MAX_ITEMS_PER_REQUEST = 100


@authenticated
async def get_playlist(
    api: SpotifyRequester,
    playlist_id: str,
    market: Optional[str] = None,
    fields: Optional[str] = None,
    additional_types: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    data = await api.get(
        f"playlists/{path_segment(playlist_id)}",
        params={"market": market, "fields": fields, "additional_types": additional_types},
        error_message="Failed to fetch playlist",
    )
    return slim_playlist(data)


@authenticated
async def change_playlist_details(
    api: SpotifyRequester,
    playlist_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    public: Optional[bool] = None,
    collaborative: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Change a playlist's name, description, visibility or collaborative flag.

    Spotify only allows collaborative=True on non-public playlists.
    """
    body: Dict[str, Any] = {}
    if name is not None:
        body["name"] = name
    if description is not None:
        body["description"] = description
    if public is not None:
        body["public"] = public
    if collaborative is not None:
        body["collaborative"] = collaborative
    if not body:
        raise ValueError("Provide at least one of name, description, public or collaborative")
    if collaborative and public:
        raise ValueError("A collaborative playlist cannot be public")

    logger.info(f"Changing playlist details: playlist_id={playlist_id}, fields={list(body)}")
    await api.put(
        f"playlists/{path_segment(playlist_id)}",
        json=body,
        error_message="Failed to change playlist details",
    )
    return {"success": True}


@authenticated
async def get_playlist_items(
    api: SpotifyRequester,
    playlist_id: str,
    market: Optional[str] = None,
    fields: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    additional_types: Optional[str] = None,
) -> Dict[str, Any]:
    data = await api.get(
        f"playlists/{path_segment(playlist_id)}/tracks",
        params={
            "market": market,
            "fields": fields,
            "limit": bound_limit(limit),
            "offset": offset,
            "additional_types": additional_types,
        },
        error_message="Failed to fetch playlist items",
    ) or {}
    items = slim_paging(data, slim_playlist_track)
    items["href"] = data.get("href")
    return items


@authenticated
async def update_playlist_items(
    api: SpotifyRequester,
    playlist_id: str,
    uris: Optional[List[str]] = None,
    range_start: Optional[int] = None,
    insert_before: Optional[int] = None,
    range_length: Optional[int] = None,
    snapshot_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Replace or reorder a playlist's items.

    Replace: pass uris (at most 100); the playlist then contains exactly those.
    Reorder: pass range_start and insert_before, optionally range_length and
    the snapshot_id the positions refer to.

    The two modes are mutually exclusive.

    Returns:
        {"success": True, "snapshot_id": <new snapshot id>}
    """
    reordering = range_start is not None or insert_before is not None or range_length is not None

    if uris is not None and reordering:
        raise ValueError("Replace (uris) and reorder (range_start/insert_before) are mutually exclusive")

    body: Dict[str, Any] = {}
    if uris is not None:
        if len(uris) > MAX_ITEMS_PER_REQUEST:
            raise ValueError(
                f"Maximum {MAX_ITEMS_PER_REQUEST} items can be sent in one request (got {len(uris)})"
            )
        body["uris"] = uris
    elif reordering:
        if range_start is None or insert_before is None:
            raise ValueError("Reordering requires both range_start and insert_before")
        require_range("range_start", range_start, 0, 2**31 - 1)
        require_range("insert_before", insert_before, 0, 2**31 - 1)
        require_range("range_length", range_length, 1, 2**31 - 1)
        body["range_start"] = range_start
        body["insert_before"] = insert_before
        if range_length is not None:
            body["range_length"] = range_length
    else:
        raise ValueError("Provide uris to replace items, or range_start and insert_before to reorder")

    if snapshot_id:
        body["snapshot_id"] = snapshot_id

    logger.info(
        f"Updating playlist items: playlist_id={playlist_id}, "
        f"mode={'replace' if uris is not None else 'reorder'}"
    )
    data = await api.put(
        f"playlists/{path_segment(playlist_id)}/tracks",
        json=body,
        error_message="Failed to update playlist items",
    ) or {}
    return {"success": True, "snapshot_id": data.get("snapshot_id")}


@authenticated
async def add_items_to_playlist(
    api: SpotifyRequester,
    playlist_id: str,
    uris: List[str],
    position: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Add up to 100 tracks or episodes, appended or inserted at position (0-based).

    The cap is checked before any request is sent.
    """
    require_max_items(uris, MAX_ITEMS_PER_REQUEST, "items")
    require_range("position", position, 0, 2**31 - 1)

    body: Dict[str, Any] = {"uris": uris}
    if position is not None:
        body["position"] = position

    logger.info(f"Adding {len(uris)} item(s) to playlist {playlist_id}")
    data = await api.post(
        f"playlists/{path_segment(playlist_id)}/tracks",
        json=body,
        error_message="Failed to add items to playlist",
    ) or {}
    return {"success": True, "snapshot_id": data.get("snapshot_id")}


@authenticated
async def follow_playlist(
    api: SpotifyRequester,
    playlist_id: str,
    public: Optional[bool] = None,
) -> Dict[str, Any]:
    body = {"public": public} if public is not None else None
    await api.put(
        f"playlists/{path_segment(playlist_id)}/followers",
        json=body,
        error_message="Failed to follow playlist",
    )
    return {"success": True}


@authenticated
async def unfollow_playlist(api: SpotifyRequester, playlist_id: str) -> Dict[str, Any]:
    await api.delete(
        f"playlists/{path_segment(playlist_id)}/followers",
        error_message="Failed to unfollow playlist",
    )
    return {"success": True}


@authenticated
async def check_current_user_follows_playlist(
    api: SpotifyRequester,
    playlist_id: str,
    user_ids: Optional[List[str]] = None,
) -> List[bool]:
    """
    Whether the current user (or each of user_ids) follows the playlist.

    Returns:
        One boolean per checked user, in input order
    """
    params = {"ids": join_ids(user_ids)} if user_ids else None
    data = await api.get(
        f"playlists/{path_segment(playlist_id)}/followers/contains",
        params=params,
        error_message="Failed to check playlist followers",
    )
    return list(data or [])
