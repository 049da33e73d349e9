"""
Domain operations for the Spotify Web API.

Every function takes a SpotifyRequester bound to the caller's session as its
first argument, validates its inputs locally and returns slimmed results.
"""
