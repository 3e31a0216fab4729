"""Centralized configuration — all env vars in one place."""

import os

# Spotify's /v1/tracks endpoint accepts at most 50 ids per call.
MAX_SAMPLE_SIZE = 50


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Spotify client-credentials app
        self.spotify_client_id: str | None = os.getenv("SPOTIFY_CLIENT_ID")
        self.spotify_client_secret: str | None = os.getenv("SPOTIFY_CLIENT_SECRET")
        self.default_playlist_id: str | None = os.getenv("PLAYLIST_ID") or None

        # Redis cache
        self.redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self.cache_prefix: str = os.getenv("CACHE_PREFIX", "spotify-api")
        self.token_ttl_seconds: int = int(os.getenv("TOKEN_TTL_SECONDS", "3600"))
        self.tracks_ttl_seconds: int = int(os.getenv("TRACKS_TTL_SECONDS", "360"))
        self.ignore_cache: bool = os.getenv("IGNORE_CACHE", "false").lower() in ("1", "true", "yes")

        # Sampling and timeouts
        self.sample_size: int = max(1, min(int(os.getenv("SAMPLE_SIZE", str(MAX_SAMPLE_SIZE))), MAX_SAMPLE_SIZE))
        self.upstream_timeout_seconds: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))
        self.request_deadline_seconds: float = float(os.getenv("REQUEST_DEADLINE_SECONDS", "20"))
        self.response_max_age_seconds: int = int(os.getenv("RESPONSE_MAX_AGE_SECONDS", "86400"))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of missing required env vars for upstream access."""
        required = ["SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_SECRET"]
        return [var for var in required if not getattr(self, _attr_for(var))]


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    mapping = {
        "SPOTIFY_CLIENT_ID": "spotify_client_id",
        "SPOTIFY_CLIENT_SECRET": "spotify_client_secret",
        "PLAYLIST_ID": "default_playlist_id",
    }
    return mapping.get(env_var, env_var.lower())
