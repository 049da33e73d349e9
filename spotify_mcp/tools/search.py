"""
MCP tool for Spotify catalogue search.
"""

from typing import Annotated, Any, Dict, Literal, Optional

from fastmcp import Context
from pydantic import Field

from spotify_mcp.mcp_instance import mcp, requester_for
from spotify_mcp.operations import search


@mcp.tool(name="search-items")
async def search_items(
    ctx: Context,
    q: Annotated[
        str,
        Field(min_length=1, description="Search query; supports filters like artist:, album:, year:, genre:"),
    ],
    type: Annotated[
        str,
        Field(
            min_length=1,
            description="Comma-separated types to search: track, artist, album, playlist, show, episode, audiobook",
        ),
    ],
    market: Annotated[Optional[str], Field(description="ISO 3166-1 alpha-2 country code")] = None,
    limit: Annotated[Optional[int], Field(ge=1, le=50, description="Results per type (1-50, default 20)")] = None,
    offset: Annotated[Optional[int], Field(ge=0, le=1000, description="Index of the first result (0-1000)")] = None,
    include_external: Annotated[
        Optional[Literal["audio"]],
        Field(description="'audio' to include externally hosted audio content"),
    ] = None,
) -> Dict[str, Any]:
    """
    Search Spotify for tracks, artists, albums, playlists, shows, episodes or
    audiobooks.

    Returns one page of results per requested type, keyed by the plural type
    name ("tracks", "artists", ...).
    """
    return await search.search_items(
        requester_for(ctx), q, type, market, limit, offset, include_external
    )
