"""
Response slimming for Spotify Web API resources.

Spotify objects carry far more than a tool caller needs (available_markets
alone can run to 180 country codes per track). Each function here projects
one resource kind onto a small, stable dict.

All functions are pure and null-safe: None in, None out. Missing nested
collections become empty lists so consumers always see the same shape.
"""

from typing import Any, Callable, Dict, List, Optional

Raw = Optional[Dict[str, Any]]
Slim = Optional[Dict[str, Any]]


def _spotify_url(raw: Dict[str, Any]) -> Optional[str]:
    return (raw.get("external_urls") or {}).get("spotify")


def _map(items: Optional[List[Any]], slim_fn: Callable[[Any], Any]) -> List[Any]:
    return [slim_fn(item) for item in (items or [])]


def _names(items: Optional[List[Any]]) -> List[Optional[str]]:
    return [item.get("name") for item in (items or []) if item is not None]


def _followers(raw: Dict[str, Any]) -> Optional[int]:
    return (raw.get("followers") or {}).get("total")


def slim_image(image: Raw) -> Slim:
    if not image:
        return None
    return {
        "url": image.get("url"),
        "height": image.get("height"),
        "width": image.get("width"),
    }


def slim_device(device: Raw) -> Slim:
    if not device:
        return None
    return {
        "id": device.get("id"),
        "is_active": device.get("is_active"),
        "is_private_session": device.get("is_private_session"),
        "is_restricted": device.get("is_restricted"),
        "name": device.get("name"),
        "type": device.get("type"),
        "volume_percent": device.get("volume_percent"),
        "supports_volume": device.get("supports_volume"),
    }


def slim_artist(artist: Raw) -> Slim:
    if not artist:
        return None
    return {
        "id": artist.get("id"),
        "name": artist.get("name"),
        "type": artist.get("type"),
        "genres": list(artist.get("genres") or []),
        "popularity": artist.get("popularity"),
        "followers": _followers(artist),
        "external_url": _spotify_url(artist),
        "uri": artist.get("uri"),
    }


def slim_album(album: Raw) -> Slim:
    if not album:
        return None
    return {
        "id": album.get("id"),
        "name": album.get("name"),
        "album_type": album.get("album_type"),
        "total_tracks": album.get("total_tracks"),
        "release_date": album.get("release_date"),
        "images": _map(album.get("images"), slim_image),
        "artists": _map(album.get("artists"), slim_artist),
        "external_url": _spotify_url(album),
        "uri": album.get("uri"),
    }


def slim_track(track: Raw) -> Slim:
    if not track:
        return None
    return {
        "id": track.get("id"),
        "name": track.get("name"),
        "artists": _names(track.get("artists")),
        "album": (track.get("album") or {}).get("name"),
        "duration_ms": track.get("duration_ms"),
        "explicit": track.get("explicit"),
        "popularity": track.get("popularity"),
        "external_url": _spotify_url(track),
        "uri": track.get("uri"),
        "is_local": track.get("is_local"),
    }


def slim_playlist_owner(owner: Raw) -> Slim:
    if not owner:
        return None
    return {
        "id": owner.get("id"),
        "type": owner.get("type"),
        "uri": owner.get("uri"),
        "display_name": owner.get("display_name"),
        "external_url": _spotify_url(owner),
    }


def slim_playlist_track(item: Raw) -> Slim:
    if not item:
        return None
    return {
        "added_at": item.get("added_at"),
        "added_by": slim_playlist_owner(item.get("added_by")),
        "is_local": item.get("is_local"),
        "track": slim_track(item.get("track")),
    }


def slim_paging(paging: Raw, slim_fn: Callable[[Any], Any]) -> Slim:
    """
    Project an offset-based paging envelope, slimming each item with slim_fn.

    Items keep their order and count; null items stay None.
    """
    if paging is None:
        return None
    return {
        "total": paging.get("total"),
        "limit": paging.get("limit"),
        "offset": paging.get("offset"),
        "next": paging.get("next"),
        "previous": paging.get("previous"),
        "items": _map(paging.get("items"), slim_fn),
    }


def slim_cursor_paging(paging: Raw, slim_fn: Callable[[Any], Any]) -> Slim:
    """Project a cursor-based paging envelope (followed artists, recently played)."""
    if paging is None:
        return None
    cursors = paging.get("cursors") or {}
    return {
        "total": paging.get("total"),
        "limit": paging.get("limit"),
        "next": paging.get("next"),
        "cursors": {
            "after": cursors.get("after"),
            "before": cursors.get("before"),
        },
        "items": _map(paging.get("items"), slim_fn),
    }


def slim_playlist(playlist: Raw) -> Slim:
    if not playlist:
        return None
    tracks = playlist.get("tracks") or {}
    slim_tracks = slim_paging(tracks, slim_playlist_track)
    slim_tracks["href"] = tracks.get("href")
    return {
        "id": playlist.get("id"),
        "name": playlist.get("name"),
        "description": playlist.get("description"),
        "collaborative": playlist.get("collaborative"),
        "public": playlist.get("public"),
        "owner": slim_playlist_owner(playlist.get("owner")),
        "images": _map(playlist.get("images"), slim_image),
        "snapshot_id": playlist.get("snapshot_id"),
        "tracks": slim_tracks,
        "external_url": _spotify_url(playlist),
        "uri": playlist.get("uri"),
        "type": playlist.get("type"),
    }


def slim_show(show: Raw) -> Slim:
    if not show:
        return None
    return {
        "id": show.get("id"),
        "name": show.get("name"),
        "publisher": show.get("publisher"),
        "description": show.get("description"),
        "explicit": show.get("explicit"),
        "external_url": _spotify_url(show),
        "uri": show.get("uri"),
    }


def slim_episode(episode: Raw) -> Slim:
    if not episode:
        return None
    return {
        "id": episode.get("id"),
        "name": episode.get("name"),
        "description": episode.get("description"),
        "duration_ms": episode.get("duration_ms"),
        "release_date": episode.get("release_date"),
        "explicit": episode.get("explicit"),
        "external_url": _spotify_url(episode),
        "uri": episode.get("uri"),
    }


def slim_audiobook(audiobook: Raw) -> Slim:
    if not audiobook:
        return None
    return {
        "id": audiobook.get("id"),
        "name": audiobook.get("name"),
        "authors": _names(audiobook.get("authors")),
        "narrators": _names(audiobook.get("narrators")),
        "publisher": audiobook.get("publisher"),
        "description": audiobook.get("description"),
        "explicit": audiobook.get("explicit"),
        "external_url": _spotify_url(audiobook),
        "uri": audiobook.get("uri"),
    }


def slim_playback_state(state: Raw) -> Slim:
    if not state:
        return None
    context = state.get("context")
    return {
        "device": slim_device(state.get("device")),
        "repeat_state": state.get("repeat_state"),
        "shuffle_state": state.get("shuffle_state"),
        "timestamp": state.get("timestamp"),
        "progress_ms": state.get("progress_ms"),
        "is_playing": state.get("is_playing"),
        "item": slim_track(state.get("item")),
        "currently_playing_type": state.get("currently_playing_type"),
        "context": {
            "type": context.get("type"),
            "uri": context.get("uri"),
            "external_url": _spotify_url(context),
        }
        if context
        else None,
    }


def slim_user_profile(profile: Raw) -> Slim:
    if not profile:
        return None
    explicit = profile.get("explicit_content")
    return {
        "id": profile.get("id"),
        "display_name": profile.get("display_name"),
        "email": profile.get("email"),
        "country": profile.get("country"),
        "product": profile.get("product"),
        "type": profile.get("type"),
        "uri": profile.get("uri"),
        "external_url": _spotify_url(profile),
        "followers": _followers(profile),
        "images": _map(profile.get("images"), slim_image),
        "explicit_content": {
            "filter_enabled": explicit.get("filter_enabled"),
            "filter_locked": explicit.get("filter_locked"),
        }
        if explicit
        else None,
    }


def slim_saved_track(item: Raw) -> Slim:
    if not item:
        return None
    return {
        "added_at": item.get("added_at"),
        "track": slim_track(item.get("track")),
    }


def slim_play_history(item: Raw) -> Slim:
    if not item:
        return None
    context = item.get("context")
    return {
        "played_at": item.get("played_at"),
        "track": slim_track(item.get("track")),
        "context": {
            "type": context.get("type"),
            "uri": context.get("uri"),
        }
        if context
        else None,
    }
