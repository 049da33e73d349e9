"""
Tests for playback operations.
"""

import json

import httpx
import pytest

from spotify_mcp.operations import player


def ok_json(body):
    return lambda request: httpx.Response(200, json=body)


def no_content(request):
    return httpx.Response(204)


class TestPlaybackState:
    @pytest.mark.asyncio
    async def test_no_active_playback(self, api_mock_with_token):
        api, mock = api_mock_with_token(no_content)

        result = await player.get_playback_state(api)

        assert result == {"status": "inactive", "is_playing": False, "message": "No active playback"}
        assert mock.last_request.url.path == "/v1/me/player"

    @pytest.mark.asyncio
    async def test_nothing_currently_playing(self, api_mock_with_token):
        api, _ = api_mock_with_token(no_content)

        result = await player.get_currently_playing(api)

        assert result["status"] == "inactive"
        assert result["is_playing"] is False
        assert result["message"] == "No track currently playing"

    @pytest.mark.asyncio
    async def test_active_playback_is_slimmed(self, api_mock_with_token):
        api, _ = api_mock_with_token(
            ok_json(
                {
                    "is_playing": True,
                    "progress_ms": 5000,
                    "device": {"id": "d1", "name": "Desk", "type": "Computer", "volume_percent": 60},
                    "item": {"id": "t1", "name": "Song", "artists": [{"name": "A"}], "available_markets": ["US"]},
                }
            )
        )

        result = await player.get_playback_state(api, market="US")

        assert result["is_playing"] is True
        assert result["device"]["name"] == "Desk"
        assert result["item"]["artists"] == ["A"]
        assert "available_markets" not in result["item"]


class TestPlaybackControl:
    @pytest.mark.asyncio
    async def test_transfer_playback_body(self, api_mock_with_token):
        api, mock = api_mock_with_token(no_content)

        result = await player.transfer_playback(api, ["device-1"], play=True)

        assert result == {"success": True}
        assert mock.last_request.method == "PUT"
        assert json.loads(mock.last_request.content) == {"device_ids": ["device-1"], "play": True}

    @pytest.mark.asyncio
    async def test_start_playback_with_context_and_offset(self, api_mock_with_token):
        api, mock = api_mock_with_token(no_content)

        await player.start_resume_playback(
            api,
            device_id="d1",
            context_uri="spotify:album:1",
            offset={"position": 2},
            position_ms=1000,
        )

        request = mock.last_request
        assert request.url.path == "/v1/me/player/play"
        assert request.url.params["device_id"] == "d1"
        assert json.loads(request.content) == {
            "context_uri": "spotify:album:1",
            "offset": {"position": 2},
            "position_ms": 1000,
        }

    @pytest.mark.asyncio
    async def test_context_and_uris_are_exclusive(self, api_mock_with_token):
        api, mock = api_mock_with_token(no_content)

        with pytest.raises(ValueError, match="not both"):
            await player.start_resume_playback(api, context_uri="spotify:album:1", uris=["spotify:track:1"])

        assert mock.call_count == 0

    @pytest.mark.asyncio
    async def test_pause_and_skip(self, api_mock_with_token):
        api, mock = api_mock_with_token(no_content)

        await player.pause_playback(api)
        await player.skip_to_next(api, device_id="d1")
        await player.skip_to_previous(api)

        assert [(r.method, r.url.path) for r in mock.requests] == [
            ("PUT", "/v1/me/player/pause"),
            ("POST", "/v1/me/player/next"),
            ("POST", "/v1/me/player/previous"),
        ]

    @pytest.mark.asyncio
    async def test_repeat_mode_validated(self, api_mock_with_token):
        api, mock = api_mock_with_token(no_content)

        with pytest.raises(ValueError, match="state must be one of"):
            await player.set_repeat_mode(api, "forever")
        await player.set_repeat_mode(api, "track")

        assert mock.call_count == 1
        assert mock.last_request.url.params["state"] == "track"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("volume", [-1, 101])
    async def test_volume_bounds(self, api_mock_with_token, volume):
        api, mock = api_mock_with_token(no_content)

        with pytest.raises(ValueError, match="volume_percent"):
            await player.set_playback_volume(api, volume)

        assert mock.call_count == 0

    @pytest.mark.asyncio
    async def test_shuffle_sends_lowercase_bool(self, api_mock_with_token):
        api, mock = api_mock_with_token(no_content)

        await player.toggle_playback_shuffle(api, False)

        assert mock.last_request.url.params["state"] == "false"

    @pytest.mark.asyncio
    async def test_seek(self, api_mock_with_token):
        api, mock = api_mock_with_token(no_content)

        await player.seek_to_position(api, 25000)

        assert mock.last_request.url.params["position_ms"] == "25000"


class TestQueueAndHistory:
    @pytest.mark.asyncio
    async def test_queue(self, api_mock_with_token):
        api, _ = api_mock_with_token(
            ok_json(
                {
                    "currently_playing": {"id": "t0", "name": "Now"},
                    "queue": [{"id": "t1", "name": "Next"}, {"id": "t2", "name": "Later"}],
                }
            )
        )

        result = await player.get_user_queue(api)

        assert result["currently_playing"]["id"] == "t0"
        assert [t["id"] for t in result["queue"]] == ["t1", "t2"]

    @pytest.mark.asyncio
    async def test_add_to_queue(self, api_mock_with_token):
        api, mock = api_mock_with_token(no_content)

        await player.add_item_to_playback_queue(api, "spotify:track:1")

        assert mock.last_request.method == "POST"
        assert mock.last_request.url.params["uri"] == "spotify:track:1"

    @pytest.mark.asyncio
    async def test_recently_played(self, api_mock_with_token):
        api, mock = api_mock_with_token(
            ok_json(
                {
                    "limit": 2,
                    "next": None,
                    "cursors": {"after": "1700000000000", "before": "1690000000000"},
                    "items": [{"played_at": "2024-01-01T00:00:00Z", "track": {"id": "t1", "name": "Song"}}],
                }
            )
        )

        result = await player.get_recently_played_tracks(api, limit=2)

        assert mock.last_request.url.params["limit"] == "2"
        assert result["cursors"]["after"] == "1700000000000"
        assert result["items"][0]["track"]["id"] == "t1"

    @pytest.mark.asyncio
    async def test_out_of_range_limit_falls_back_to_default(self, api_mock_with_token):
        api, mock = api_mock_with_token(ok_json({"items": []}))

        await player.get_recently_played_tracks(api, limit=500)

        assert mock.last_request.url.params["limit"] == "20"

    @pytest.mark.asyncio
    async def test_after_and_before_exclusive(self, api_mock_with_token):
        api, mock = api_mock_with_token(ok_json({}))

        with pytest.raises(ValueError):
            await player.get_recently_played_tracks(api, after=1, before=2)

        assert mock.call_count == 0
