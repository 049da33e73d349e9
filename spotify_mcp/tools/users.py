"""
MCP tools for Spotify user profiles and following.
"""

from typing import Annotated, Any, Dict, Literal, Optional

from fastmcp import Context
from pydantic import Field

from spotify_mcp.mcp_instance import mcp, requester_for
from spotify_mcp.operations import users

FollowType = Annotated[Literal["artist", "user"], Field(description="Kind of ids given")]
FollowIds = Annotated[str, Field(min_length=1, description="Comma-separated artist or user ids (max 50)")]


@mcp.tool(name="get-current-user-profile")
async def get_current_user_profile(ctx: Context) -> Optional[Dict[str, Any]]:
    """Get the signed-in user's profile."""
    return await users.get_current_user_profile(requester_for(ctx))


@mcp.tool(name="get-user-profile")
async def get_user_profile(
    ctx: Context,
    user_id: Annotated[str, Field(min_length=1, description="Spotify user id")],
) -> Optional[Dict[str, Any]]:
    """Get the public profile of a Spotify user."""
    return await users.get_user_profile(requester_for(ctx), user_id)


@mcp.tool(name="get-current-user-top-items")
async def get_current_user_top_items(
    ctx: Context,
    type: Annotated[Literal["tracks", "artists"], Field(description="Kind of top items")],
    time_range: Annotated[
        Optional[Literal["short_term", "medium_term", "long_term"]],
        Field(description="short_term ~4 weeks, medium_term ~6 months (default), long_term ~1 year"),
    ] = None,
    limit: Annotated[Optional[int], Field(ge=1, le=50, description="Items per page (1-50, default 20)")] = None,
    offset: Annotated[Optional[int], Field(ge=0, description="Index of the first item")] = None,
) -> Dict[str, Any]:
    """Get the user's top artists or tracks based on listening affinity."""
    return await users.get_current_user_top_items(requester_for(ctx), type, time_range, limit, offset)


@mcp.tool(name="get-followed-artists")
async def get_followed_artists(
    ctx: Context,
    after: Annotated[Optional[str], Field(description="Last artist id from the previous page")] = None,
    limit: Annotated[Optional[int], Field(ge=1, le=50, description="Items per page (1-50, default 20)")] = None,
) -> Dict[str, Any]:
    """Get the artists the user follows."""
    return await users.get_followed_artists(requester_for(ctx), after, limit)


@mcp.tool(name="follow-artists-or-users")
async def follow_artists_or_users(ctx: Context, type: FollowType, ids: FollowIds) -> Dict[str, Any]:
    """Follow one or more artists or Spotify users."""
    return await users.follow_artists_or_users(requester_for(ctx), type, ids)


@mcp.tool(name="unfollow-artists-or-users")
async def unfollow_artists_or_users(ctx: Context, type: FollowType, ids: FollowIds) -> Dict[str, Any]:
    """Unfollow one or more artists or Spotify users."""
    return await users.unfollow_artists_or_users(requester_for(ctx), type, ids)


@mcp.tool(name="check-if-user-follows")
async def check_if_user_follows(ctx: Context, type: FollowType, ids: FollowIds) -> Dict[str, Any]:
    """
    Check whether the user follows artists or other Spotify users.

    Returns:
        {"type": ..., "ids": ..., "statuses": [bool, ...]} aligned to ids
    """
    statuses = await users.check_if_user_follows(requester_for(ctx), type, ids)
    return {"type": type, "ids": ids, "statuses": statuses}
