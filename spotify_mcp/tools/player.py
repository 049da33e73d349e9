"""
MCP tools for Spotify playback control.

Playback control requires a Spotify Premium account and an active Spotify
Connect device (desktop app, phone, speaker, web player).
"""

from typing import Annotated, Any, Dict, Literal, Optional

from fastmcp import Context
from pydantic import Field

from spotify_mcp.mcp_instance import mcp, requester_for
from spotify_mcp.operations import player
from spotify_mcp.utils.params import split_ids

DeviceId = Annotated[
    Optional[str],
    Field(description="Target device id; the currently active device when omitted"),
]
Market = Annotated[
    Optional[str],
    Field(description="ISO 3166-1 alpha-2 country code, e.g. 'US'"),
]
AdditionalTypes = Annotated[
    Optional[str],
    Field(description="Comma-separated item types besides track, e.g. 'episode'"),
]


@mcp.tool(name="get-playback-state")
async def get_playback_state(
    ctx: Context,
    market: Market = None,
    additional_types: AdditionalTypes = None,
) -> Dict[str, Any]:
    """
    Get the user's current playback state, including track or episode,
    progress and active device.

    When nothing is playing on any device the result is
    {"status": "inactive", "is_playing": false, "message": "..."}.
    """
    return await player.get_playback_state(requester_for(ctx), market, additional_types)


@mcp.tool(name="transfer-playback")
async def transfer_playback(
    ctx: Context,
    device_id: Annotated[str, Field(min_length=1, description="Device to transfer playback to")],
    play: Annotated[
        Optional[bool],
        Field(description="True to start playing on the new device, False to keep the current state"),
    ] = None,
) -> Dict[str, Any]:
    """Transfer playback to a new device."""
    return await player.transfer_playback(requester_for(ctx), [device_id], play)


@mcp.tool(name="get-available-devices")
async def get_available_devices(ctx: Context) -> Dict[str, Any]:
    """List the Spotify Connect devices available to the user."""
    return await player.get_available_devices(requester_for(ctx))


@mcp.tool(name="get-currently-playing-track")
async def get_currently_playing_track(
    ctx: Context,
    market: Market = None,
    additional_types: AdditionalTypes = None,
) -> Dict[str, Any]:
    """Get the track or episode currently playing on the user's account."""
    return await player.get_currently_playing(requester_for(ctx), market, additional_types)


@mcp.tool(name="start-resume-playback")
async def start_resume_playback(
    ctx: Context,
    device_id: DeviceId = None,
    context_uri: Annotated[
        Optional[str],
        Field(description="Album, artist or playlist URI to play, e.g. spotify:album:..."),
    ] = None,
    uris: Annotated[
        Optional[str],
        Field(description="Comma-separated track URIs to play; cannot be combined with context_uri"),
    ] = None,
    offset_position: Annotated[
        Optional[int],
        Field(ge=0, description="Zero-based position in the context or URI list to start from"),
    ] = None,
    offset_uri: Annotated[
        Optional[str],
        Field(description="URI of the item in the context to start from"),
    ] = None,
    position_ms: Annotated[
        Optional[int],
        Field(ge=0, description="Position in milliseconds to seek to in the first item"),
    ] = None,
) -> Dict[str, Any]:
    """
    Start a new context or resume current playback on the user's active device.

    Without context_uri or uris, playback resumes where it was paused.
    """
    offset: Optional[Dict[str, Any]] = None
    if offset_position is not None and offset_uri:
        raise ValueError("Provide either offset_position or offset_uri, not both")
    if offset_position is not None:
        offset = {"position": offset_position}
    elif offset_uri:
        offset = {"uri": offset_uri}

    return await player.start_resume_playback(
        requester_for(ctx),
        device_id=device_id,
        context_uri=context_uri,
        uris=split_ids(uris) if uris else None,
        offset=offset,
        position_ms=position_ms,
    )


@mcp.tool(name="pause-playback")
async def pause_playback(ctx: Context, device_id: DeviceId = None) -> Dict[str, Any]:
    """Pause playback on the user's account."""
    return await player.pause_playback(requester_for(ctx), device_id)


@mcp.tool(name="skip-to-next")
async def skip_to_next(ctx: Context, device_id: DeviceId = None) -> Dict[str, Any]:
    """Skip to the next track in the user's queue."""
    return await player.skip_to_next(requester_for(ctx), device_id)


@mcp.tool(name="skip-to-previous")
async def skip_to_previous(ctx: Context, device_id: DeviceId = None) -> Dict[str, Any]:
    """Skip to the previous track in the user's queue."""
    return await player.skip_to_previous(requester_for(ctx), device_id)


@mcp.tool(name="seek-to-position")
async def seek_to_position(
    ctx: Context,
    position_ms: Annotated[int, Field(ge=0, description="Position in milliseconds")],
    device_id: DeviceId = None,
) -> Dict[str, Any]:
    """Seek to the given position in the currently playing track."""
    return await player.seek_to_position(requester_for(ctx), position_ms, device_id)


@mcp.tool(name="set-repeat-mode")
async def set_repeat_mode(
    ctx: Context,
    state: Annotated[
        Literal["track", "context", "off"],
        Field(description="track repeats the current track, context the current context, off disables repeat"),
    ],
    device_id: DeviceId = None,
) -> Dict[str, Any]:
    """Set the repeat mode for the user's playback."""
    return await player.set_repeat_mode(requester_for(ctx), state, device_id)


@mcp.tool(name="set-playback-volume")
async def set_playback_volume(
    ctx: Context,
    volume_percent: Annotated[int, Field(ge=0, le=100, description="Volume from 0 to 100")],
    device_id: DeviceId = None,
) -> Dict[str, Any]:
    """Set the volume for the user's current playback device."""
    return await player.set_playback_volume(requester_for(ctx), volume_percent, device_id)


@mcp.tool(name="toggle-playback-shuffle")
async def toggle_playback_shuffle(
    ctx: Context,
    state: Annotated[bool, Field(description="True to shuffle, False to play in order")],
    device_id: DeviceId = None,
) -> Dict[str, Any]:
    """Turn shuffle on or off for the user's playback."""
    return await player.toggle_playback_shuffle(requester_for(ctx), state, device_id)


@mcp.tool(name="get-recently-played-tracks")
async def get_recently_played_tracks(
    ctx: Context,
    limit: Annotated[Optional[int], Field(ge=1, le=50, description="Number of items (1-50, default 20)")] = None,
    after: Annotated[
        Optional[int],
        Field(description="Unix timestamp in ms; return items played after it. Cannot be combined with before"),
    ] = None,
    before: Annotated[
        Optional[int],
        Field(description="Unix timestamp in ms; return items played before it"),
    ] = None,
) -> Dict[str, Any]:
    """Get tracks from the user's recently played history."""
    return await player.get_recently_played_tracks(requester_for(ctx), limit, after, before)


@mcp.tool(name="get-user-queue")
async def get_user_queue(ctx: Context) -> Dict[str, Any]:
    """Get the currently playing item and the user's upcoming queue."""
    return await player.get_user_queue(requester_for(ctx))


@mcp.tool(name="add-item-to-playback-queue")
async def add_item_to_playback_queue(
    ctx: Context,
    uri: Annotated[str, Field(min_length=1, description="Track or episode URI to queue")],
    device_id: DeviceId = None,
) -> Dict[str, Any]:
    """Add a track or episode to the end of the user's playback queue."""
    return await player.add_item_to_playback_queue(requester_for(ctx), uri, device_id)
