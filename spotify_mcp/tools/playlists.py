"""
MCP tools for Spotify playlists.
"""

from typing import Annotated, Any, Dict, Optional

from fastmcp import Context
from pydantic import Field

from spotify_mcp.mcp_instance import mcp, requester_for
from spotify_mcp.operations import playlists
from spotify_mcp.utils.params import split_ids

PlaylistId = Annotated[str, Field(min_length=1, description="Spotify playlist id")]
Market = Annotated[Optional[str], Field(description="ISO 3166-1 alpha-2 country code")]


@mcp.tool(name="get-playlist")
async def get_playlist(
    ctx: Context,
    playlist_id: PlaylistId,
    market: Market = None,
    fields: Annotated[
        Optional[str],
        Field(description="Spotify field filter, e.g. 'name,tracks.items(track(name))'"),
    ] = None,
    additional_types: Annotated[
        Optional[str],
        Field(description="Comma-separated item types besides track, e.g. 'episode'"),
    ] = None,
) -> Optional[Dict[str, Any]]:
    """Get a playlist owned by a Spotify user, including its first page of items."""
    return await playlists.get_playlist(
        requester_for(ctx), playlist_id, market, fields, additional_types
    )


@mcp.tool(name="change-playlist-details")
async def change_playlist_details(
    ctx: Context,
    playlist_id: PlaylistId,
    name: Annotated[Optional[str], Field(description="New playlist name")] = None,
    description: Annotated[Optional[str], Field(description="New playlist description")] = None,
    public: Annotated[Optional[bool], Field(description="Make the playlist public or private")] = None,
    collaborative: Annotated[
        Optional[bool],
        Field(description="Allow others to modify the playlist; only valid for private playlists"),
    ] = None,
) -> Dict[str, Any]:
    """
    Change a playlist's name, description, visibility or collaborative state.

    The user must own the playlist.
    """
    return await playlists.change_playlist_details(
        requester_for(ctx), playlist_id, name, description, public, collaborative
    )


@mcp.tool(name="get-playlist-items")
async def get_playlist_items(
    ctx: Context,
    playlist_id: PlaylistId,
    market: Market = None,
    fields: Annotated[Optional[str], Field(description="Spotify field filter")] = None,
    limit: Annotated[Optional[int], Field(ge=1, le=50, description="Items per page (1-50, default 20)")] = None,
    offset: Annotated[Optional[int], Field(ge=0, description="Index of the first item")] = None,
    additional_types: Annotated[
        Optional[str],
        Field(description="Comma-separated item types besides track"),
    ] = None,
) -> Dict[str, Any]:
    """Get one page of a playlist's items."""
    return await playlists.get_playlist_items(
        requester_for(ctx), playlist_id, market, fields, limit, offset, additional_types
    )


@mcp.tool(name="update-playlist-items")
async def update_playlist_items(
    ctx: Context,
    playlist_id: PlaylistId,
    uris: Annotated[
        Optional[str],
        Field(description="Comma-separated URIs that replace all items (max 100)"),
    ] = None,
    range_start: Annotated[Optional[int], Field(ge=0, description="Position of the first item to move")] = None,
    insert_before: Annotated[Optional[int], Field(ge=0, description="Position to move the items to")] = None,
    range_length: Annotated[Optional[int], Field(ge=1, description="Number of items to move (default 1)")] = None,
    snapshot_id: Annotated[
        Optional[str],
        Field(description="Playlist version the positions refer to"),
    ] = None,
) -> Dict[str, Any]:
    """
    Replace or reorder the items of a playlist.

    Pass uris to replace every item, or range_start and insert_before to
    move a block of items. The two modes cannot be combined.
    """
    return await playlists.update_playlist_items(
        requester_for(ctx),
        playlist_id,
        uris=split_ids(uris) if uris is not None else None,
        range_start=range_start,
        insert_before=insert_before,
        range_length=range_length,
        snapshot_id=snapshot_id,
    )


@mcp.tool(name="add-items-to-playlist")
async def add_items_to_playlist(
    ctx: Context,
    playlist_id: PlaylistId,
    uris: Annotated[
        str,
        Field(min_length=1, description="Comma-separated track or episode URIs (max 100)"),
    ],
    position: Annotated[
        Optional[int],
        Field(ge=0, description="Zero-based position to insert at; appended when omitted"),
    ] = None,
) -> Dict[str, Any]:
    """Add one or more items to a playlist."""
    return await playlists.add_items_to_playlist(
        requester_for(ctx), playlist_id, split_ids(uris), position
    )


@mcp.tool(name="follow-or-unfollow-playlist")
async def follow_or_unfollow_playlist(
    ctx: Context,
    playlist_id: PlaylistId,
    follow: Annotated[bool, Field(description="True to follow, False to unfollow")] = True,
) -> Dict[str, Any]:
    """Follow or unfollow a playlist for the current user."""
    api = requester_for(ctx)
    if follow:
        await playlists.follow_playlist(api, playlist_id)
    else:
        await playlists.unfollow_playlist(api, playlist_id)
    return {
        "success": True,
        "playlistId": playlist_id,
        "action": "followed" if follow else "unfollowed",
    }


@mcp.tool(name="check-if-current-user-follows-playlist")
async def check_if_current_user_follows_playlist(
    ctx: Context,
    playlist_id: PlaylistId,
) -> Dict[str, Any]:
    """Check whether the current user follows a playlist."""
    statuses = await playlists.check_current_user_follows_playlist(requester_for(ctx), playlist_id)
    return {"playlistId": playlist_id, "isFollowing": bool(statuses and statuses[0])}
