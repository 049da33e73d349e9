"""
User profile and follow-graph operations.
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from spotify_mcp.utils.params import bound_limit, join_ids, require_max_items, split_ids
from spotify_mcp.utils.requests import SpotifyRequester, authenticated, path_segment
from spotify_mcp.utils.slim import slim_artist, slim_cursor_paging, slim_paging, slim_track, slim_user_profile

TOP_ITEM_TYPES = ("tracks", "artists")
TIME_RANGES = ("short_term", "medium_term", "long_term")
FOLLOW_TYPES = ("artist", "user")
MAX_IDS_PER_REQUEST = 50


def _follow_ids(type_: str, ids: str) -> List[str]:
    if type_ not in FOLLOW_TYPES:
        raise ValueError(f"type must be one of {', '.join(FOLLOW_TYPES)} (got {type_!r})")
    parsed = split_ids(ids)
    require_max_items(parsed, MAX_IDS_PER_REQUEST, "ids")
    return parsed


@authenticated
async def get_user_profile(api: SpotifyRequester, user_id: str) -> Optional[Dict[str, Any]]:
    data = await api.get(f"users/{path_segment(user_id)}", error_message="Failed to fetch user profile")
    return slim_user_profile(data)


@authenticated
async def get_current_user_profile(api: SpotifyRequester) -> Optional[Dict[str, Any]]:
    data = await api.get("me", error_message="Failed to fetch user profile")
    return slim_user_profile(data)


@authenticated
async def get_current_user_top_items(
    api: SpotifyRequester,
    type_: str,
    time_range: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> Dict[str, Any]:
    """
    The user's top tracks or artists by affinity.

    Args:
        type_: "tracks" or "artists"
        time_range: short_term (~4 weeks), medium_term (~6 months, default)
            or long_term (~1 year)
        limit: 1-50, out-of-range values fall back to 20
        offset: Index of the first item
    """
    if type_ not in TOP_ITEM_TYPES:
        raise ValueError(f"type must be one of {', '.join(TOP_ITEM_TYPES)} (got {type_!r})")
    if time_range is not None and time_range not in TIME_RANGES:
        raise ValueError(f"time_range must be one of {', '.join(TIME_RANGES)} (got {time_range!r})")

    data = await api.get(
        f"me/top/{type_}",
        params={
            "time_range": time_range or "medium_term",
            "limit": bound_limit(limit),
            "offset": offset or 0,
        },
        error_message="Failed to fetch user top items",
    )
    slim_fn = slim_track if type_ == "tracks" else slim_artist
    return slim_paging(data or {}, slim_fn)


@authenticated
async def follow_artists_or_users(api: SpotifyRequester, type_: str, ids: str) -> Dict[str, Any]:
    parsed = _follow_ids(type_, ids)
    logger.info(f"Following {len(parsed)} {type_}(s)")
    await api.put(
        "me/following",
        params={"type": type_},
        json={"ids": parsed},
        error_message=f"Failed to follow {type_}s",
    )
    return {"success": True}


@authenticated
async def unfollow_artists_or_users(api: SpotifyRequester, type_: str, ids: str) -> Dict[str, Any]:
    parsed = _follow_ids(type_, ids)
    logger.info(f"Unfollowing {len(parsed)} {type_}(s)")
    await api.delete(
        "me/following",
        params={"type": type_},
        json={"ids": parsed},
        error_message=f"Failed to unfollow {type_}s",
    )
    return {"success": True}


@authenticated
async def get_followed_artists(
    api: SpotifyRequester,
    after: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """Artists the user follows, paged by the last artist id seen (after)."""
    data = await api.get(
        "me/following",
        params={"type": "artist", "after": after, "limit": bound_limit(limit)},
        error_message="Failed to fetch followed artists",
    ) or {}
    return slim_cursor_paging(data.get("artists") or {}, slim_artist)


@authenticated
async def check_if_user_follows(api: SpotifyRequester, type_: str, ids: str) -> List[bool]:
    parsed = _follow_ids(type_, ids)
    data = await api.get(
        "me/following/contains",
        params={"type": type_, "ids": join_ids(parsed)},
        error_message="Failed to check follow status",
    )
    return list(data or [])
