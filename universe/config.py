"""Application settings, read from ``UNIVERSE_*`` environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="UNIVERSE_", env_file=".env", extra="ignore")

    app_name: str = "Universe Event Service"
    log_level: str = "INFO"

    # Storage
    events_collection: str = "events"
    users_collection: str = "users"
    chats_collection: str = "chats"

    # AI event generation
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    ai_event_count: int = 5
    ai_search_radius_km: float = 5.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
