"""
Playback operations (Spotify Connect).

Control endpoints answer 204 No Content on success; they return
{"success": True}. Most of them require a Spotify Premium account.
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from spotify_mcp.utils.params import bound_limit, require_range
from spotify_mcp.utils.requests import SpotifyRequester, authenticated
from spotify_mcp.utils.slim import (
    slim_cursor_paging,
    slim_device,
    slim_play_history,
    slim_playback_state,
    slim_track,
)

REPEAT_STATES = ("track", "context", "off")


def _inactive(message: str) -> Dict[str, Any]:
    return {"status": "inactive", "is_playing": False, "message": message}


@authenticated
async def get_playback_state(
    api: SpotifyRequester,
    market: Optional[str] = None,
    additional_types: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Current playback state: track or episode, progress and active device.

    A 204 from Spotify means nothing is playing on any device; that is
    reported as an inactive status rather than an error.
    """
    data = await api.get(
        "me/player",
        params={"market": market, "additional_types": additional_types},
        error_message="Failed to fetch playback state",
    )
    if data is None:
        return _inactive("No active playback")
    return slim_playback_state(data)


@authenticated
async def transfer_playback(
    api: SpotifyRequester,
    device_ids: List[str],
    play: Optional[bool] = None,
) -> Dict[str, Any]:
    if not device_ids:
        raise ValueError("At least one device id is required")
    body: Dict[str, Any] = {"device_ids": device_ids}
    if play is not None:
        body["play"] = play
    logger.info(f"Transferring playback to {device_ids}")
    await api.put("me/player", json=body, error_message="Failed to transfer playback")
    return {"success": True}


@authenticated
async def get_available_devices(api: SpotifyRequester) -> Dict[str, Any]:
    data = await api.get("me/player/devices", error_message="Failed to fetch available devices")
    return {"devices": [slim_device(d) for d in (data or {}).get("devices") or []]}


@authenticated
async def get_currently_playing(
    api: SpotifyRequester,
    market: Optional[str] = None,
    additional_types: Optional[str] = None,
) -> Dict[str, Any]:
    data = await api.get(
        "me/player/currently-playing",
        params={"market": market, "additional_types": additional_types},
        error_message="Failed to fetch currently playing track",
    )
    if data is None:
        return _inactive("No track currently playing")
    return slim_playback_state(data)


@authenticated
async def start_resume_playback(
    api: SpotifyRequester,
    device_id: Optional[str] = None,
    context_uri: Optional[str] = None,
    uris: Optional[List[str]] = None,
    offset: Optional[Dict[str, Any]] = None,
    position_ms: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Start a new context or resume current playback.

    Args:
        device_id: Target device; the active device when omitted
        context_uri: Album, artist or playlist URI to play
        uris: Explicit track URIs to play (exclusive with context_uri)
        offset: {"position": n} or {"uri": "..."} within the context or list
        position_ms: Start position within the first track
    """
    if context_uri and uris:
        raise ValueError("Provide either context_uri or uris, not both")
    if offset and not (context_uri or uris):
        raise ValueError("offset requires context_uri or uris")
    require_range("position_ms", position_ms, 0, 2**31 - 1)

    body: Dict[str, Any] = {}
    if context_uri:
        body["context_uri"] = context_uri
    if uris:
        body["uris"] = uris
    if offset:
        body["offset"] = offset
    if position_ms is not None:
        body["position_ms"] = position_ms

    await api.put(
        "me/player/play",
        params={"device_id": device_id},
        json=body,
        error_message="Failed to start/resume playback",
    )
    return {"success": True}


@authenticated
async def pause_playback(api: SpotifyRequester, device_id: Optional[str] = None) -> Dict[str, Any]:
    await api.put(
        "me/player/pause",
        params={"device_id": device_id},
        error_message="Failed to pause playback",
    )
    return {"success": True}


@authenticated
async def skip_to_next(api: SpotifyRequester, device_id: Optional[str] = None) -> Dict[str, Any]:
    await api.post(
        "me/player/next",
        params={"device_id": device_id},
        error_message="Failed to skip to next track",
    )
    return {"success": True}


@authenticated
async def skip_to_previous(api: SpotifyRequester, device_id: Optional[str] = None) -> Dict[str, Any]:
    await api.post(
        "me/player/previous",
        params={"device_id": device_id},
        error_message="Failed to skip to previous track",
    )
    return {"success": True}


@authenticated
async def seek_to_position(
    api: SpotifyRequester,
    position_ms: int,
    device_id: Optional[str] = None,
) -> Dict[str, Any]:
    require_range("position_ms", position_ms, 0, 2**31 - 1)
    await api.put(
        "me/player/seek",
        params={"position_ms": position_ms, "device_id": device_id},
        error_message="Failed to seek",
    )
    return {"success": True}


@authenticated
async def set_repeat_mode(
    api: SpotifyRequester,
    state: str,
    device_id: Optional[str] = None,
) -> Dict[str, Any]:
    if state not in REPEAT_STATES:
        raise ValueError(f"state must be one of {', '.join(REPEAT_STATES)} (got {state!r})")
    await api.put(
        "me/player/repeat",
        params={"state": state, "device_id": device_id},
        error_message="Failed to set repeat mode",
    )
    return {"success": True}


@authenticated
async def set_playback_volume(
    api: SpotifyRequester,
    volume_percent: int,
    device_id: Optional[str] = None,
) -> Dict[str, Any]:
    require_range("volume_percent", volume_percent, 0, 100)
    await api.put(
        "me/player/volume",
        params={"volume_percent": volume_percent, "device_id": device_id},
        error_message="Failed to set volume",
    )
    return {"success": True}


@authenticated
async def toggle_playback_shuffle(
    api: SpotifyRequester,
    state: bool,
    device_id: Optional[str] = None,
) -> Dict[str, Any]:
    await api.put(
        "me/player/shuffle",
        params={"state": "true" if state else "false", "device_id": device_id},
        error_message="Failed to toggle shuffle",
    )
    return {"success": True}


@authenticated
async def get_user_queue(api: SpotifyRequester) -> Dict[str, Any]:
    data = await api.get("me/player/queue", error_message="Failed to fetch queue") or {}
    return {
        "currently_playing": slim_track(data.get("currently_playing")),
        "queue": [slim_track(item) for item in data.get("queue") or []],
    }


@authenticated
async def add_item_to_playback_queue(
    api: SpotifyRequester,
    uri: str,
    device_id: Optional[str] = None,
) -> Dict[str, Any]:
    if not uri:
        raise ValueError("uri is required")
    await api.post(
        "me/player/queue",
        params={"uri": uri, "device_id": device_id},
        error_message="Failed to add item to queue",
    )
    return {"success": True}


@authenticated
async def get_recently_played_tracks(
    api: SpotifyRequester,
    limit: Optional[int] = None,
    after: Optional[int] = None,
    before: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Recently played tracks, newest first.

    after and before are Unix timestamps in milliseconds and are mutually
    exclusive.
    """
    if after is not None and before is not None:
        raise ValueError("Provide either after or before, not both")
    data = await api.get(
        "me/player/recently-played",
        params={"limit": bound_limit(limit), "after": after, "before": before},
        error_message="Failed to fetch recently played tracks",
    )
    return slim_cursor_paging(data or {}, slim_play_history)
