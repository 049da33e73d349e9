"""
Configuration management for the Spotify MCP service.

Loads settings from environment variables with SPOTIFY_ prefix.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Spotify application credentials
    # Missing values don't fail construction; authorization just fails upstream
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = "http://127.0.0.1:3000/callback"

    # Spotify endpoints
    api_base_url: str = "https://api.spotify.com/v1"
    accounts_base_url: str = "https://accounts.spotify.com"

    # Link shortening for the authorization URL (best effort)
    shortener_url: str = "https://is.gd/create.php"
    shorten_links: bool = True

    # Token and authorization state lifetimes
    # Spotify access tokens live for one hour
    token_ttl_seconds: int = 3600
    state_ttl_seconds: int = 600
    verify_state: bool = True

    # When enabled, tokens are keyed by MCP transport session id
    # instead of the single process-wide slot
    session_scoped: bool = False

    # Outbound HTTP behavior
    request_timeout_seconds: float = 10.0
    shortener_timeout_seconds: float = 5.0
    max_retries: int = 3

    # Logging
    log_level: str = "INFO"

    # Server configuration
    host: str = "0.0.0.0"
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("SPOTIFY_PORT", "PORT"),
    )

    # shutdown_timeout_seconds controls how long uvicorn waits for in-flight
    # requests before force-closing during graceful shutdown (SIGTERM/SIGINT)
    shutdown_timeout_seconds: int = 7
    uvicorn_access_log: bool = False

    model_config = SettingsConfigDict(
        env_prefix="SPOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def authorize_url(self) -> str:
        return f"{self.accounts_base_url.rstrip('/')}/authorize"

    @property
    def token_url(self) -> str:
        return f"{self.accounts_base_url.rstrip('/')}/api/token"

    def warn_missing_credentials(self) -> None:
        """Log a warning for each credential the authorization flow needs but lacks."""
        for name in ("client_id", "client_secret", "redirect_uri"):
            if not getattr(self, name):
                logger.warning(
                    f"SPOTIFY_{name.upper()} is not set; "
                    "authorization against Spotify will fail until it is configured."
                )


# Global settings instance
settings = Settings()
