"""
MCP tools for Spotify tracks and the saved-tracks library.
"""

from typing import Annotated, Any, Dict, Optional

from fastmcp import Context
from pydantic import Field

from spotify_mcp.mcp_instance import mcp, requester_for
from spotify_mcp.operations import tracks

TrackIds = Annotated[str, Field(min_length=1, description="Comma-separated Spotify track ids (max 50)")]
Market = Annotated[Optional[str], Field(description="ISO 3166-1 alpha-2 country code")]


@mcp.tool(name="get-track")
async def get_track(
    ctx: Context,
    track_id: Annotated[str, Field(min_length=1, description="Spotify track id")],
    market: Market = None,
) -> Optional[Dict[str, Any]]:
    """Get catalogue information for a single track."""
    return await tracks.get_track(requester_for(ctx), track_id, market)


@mcp.tool(name="get-several-tracks")
async def get_several_tracks(ctx: Context, ids: TrackIds, market: Market = None) -> Dict[str, Any]:
    """Get catalogue information for several tracks at once."""
    return await tracks.get_several_tracks(requester_for(ctx), ids, market)


@mcp.tool(name="get-saved-tracks")
async def get_saved_tracks(
    ctx: Context,
    limit: Annotated[Optional[int], Field(ge=1, le=50, description="Items per page (1-50, default 20)")] = None,
    offset: Annotated[Optional[int], Field(ge=0, description="Index of the first item")] = None,
    market: Market = None,
) -> Dict[str, Any]:
    """Get one page of the tracks saved in the user's library."""
    return await tracks.get_saved_tracks(requester_for(ctx), limit, offset, market)


@mcp.tool(name="save-tracks-for-current-user")
async def save_tracks_for_current_user(ctx: Context, ids: TrackIds) -> Dict[str, Any]:
    """Save one or more tracks to the user's library."""
    return await tracks.save_tracks(requester_for(ctx), ids)


@mcp.tool(name="remove-users-saved-tracks")
async def remove_users_saved_tracks(ctx: Context, ids: TrackIds) -> Dict[str, Any]:
    """Remove one or more tracks from the user's library."""
    return await tracks.remove_saved_tracks(requester_for(ctx), ids)


@mcp.tool(name="check-users-saved-tracks")
async def check_users_saved_tracks(ctx: Context, ids: TrackIds) -> Dict[str, Any]:
    """
    Check whether tracks are saved in the user's library.

    Returns:
        {"ids": ..., "saved": [bool, ...]} with one flag per id, in order
    """
    saved = await tracks.check_saved_tracks(requester_for(ctx), ids)
    return {"ids": ids, "saved": saved}
