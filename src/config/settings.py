"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Discord configuration
    discord_token: str = ""
    discord_guild_id: int | None = None  # Sync slash commands to one guild when set
    discord_invite_url: str | None = None
    private_responses_in_guilds: bool = True

    # Record store (Airtable)
    airtable_api_key: str = ""
    airtable_base_id: str = ""
    airtable_sellers_table: str = "Sellers"
    airtable_api_url: str = "https://api.airtable.com/v0"

    # Automation webhook (PDF generation)
    make_webhook_url: str | None = None

    http_timeout_seconds: float = 10.0

    # Registration settings
    session_ttl_seconds: int = 900  # Idle window before a session is evictable
    session_sweep_interval_seconds: int = 60
    consent_version: str = "v1"
    consent_method: str = "Discord button"

    # Process settings
    port: int = 3000
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
