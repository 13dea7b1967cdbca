"""Configuration settings for the content CLI."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables (prefix DC_CLI_)."""

    model_config = SettingsConfigDict(
        env_prefix="DC_CLI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Platform endpoints
    api_url: str = "https://api.amplience.net/v2/content"
    auth_url: str = "https://auth.amplience.net"

    # Credentials (client credentials or a personal access token)
    client_id: str = ""
    client_secret: str = ""
    pat_token: str = ""
    hub_id: str = ""

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # "json" or "text"

    # HTTP
    http_timeout_seconds: float = 60.0

    # Burstable queue defaults
    queue_concurrency: int = 4
    queue_min_time_ms: int = 1000  # Minimum gap between two task starts
    queue_burst_interval_cap: int = 70  # Initial reservoir
    queue_sustained_interval_cap: int = 30  # Reservoir growth per interval
    queue_interval_ms: int = 60_000

    # Job polling
    job_poll_delay_ms: int = 200
    job_poll_max_attempts: Optional[int] = None  # None = poll until terminal


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def clear_settings_cache():
    """Clear settings cache (useful for testing)."""
    get_settings.cache_clear()
