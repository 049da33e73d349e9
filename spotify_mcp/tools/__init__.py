"""
MCP tools for the Spotify Web API.

Each module registers the tools for one area:
- auth: sign-in status and authorization link
- player: playback control, devices, queue, history
- playlists: playlist details, items, following
- tracks: track lookup and saved-tracks library
- search: catalogue search
- users: profiles, top items, follow graph
"""
