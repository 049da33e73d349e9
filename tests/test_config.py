"""
Tests for settings loading.
"""

from spotify_mcp.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_SECRET", "SPOTIFY_SHORTEN_LINKS", "PORT", "SPOTIFY_PORT"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.client_id == ""
        assert settings.port == 3000
        assert settings.token_ttl_seconds == 3600
        assert settings.state_ttl_seconds == 600
        assert settings.verify_state is True
        assert settings.session_scoped is False
        assert settings.shorten_links is True
        assert settings.authorize_url == "https://accounts.spotify.com/authorize"
        assert settings.token_url == "https://accounts.spotify.com/api/token"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "from-env")
        monkeypatch.setenv("SPOTIFY_MAX_RETRIES", "5")

        settings = Settings(_env_file=None)

        assert settings.client_id == "from-env"
        assert settings.max_retries == 5

    def test_port_accepts_unprefixed_alias(self, monkeypatch):
        monkeypatch.delenv("SPOTIFY_PORT", raising=False)
        monkeypatch.setenv("PORT", "8888")

        assert Settings(_env_file=None).port == 8888

    def test_missing_credentials_do_not_raise(self, monkeypatch):
        monkeypatch.delenv("SPOTIFY_CLIENT_ID", raising=False)
        monkeypatch.delenv("SPOTIFY_CLIENT_SECRET", raising=False)

        settings = Settings(_env_file=None)
        settings.warn_missing_credentials()

        assert settings.client_secret == ""
