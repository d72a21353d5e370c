"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_key: str
    nutritionix_app_id: str
    nutritionix_app_key: str
    nutritionix_base_url: str = "https://trackapi.nutritionix.com/v2"
    search_timeout_seconds: float = 15.0
    timezone: str = "UTC"
    notifications_enabled: bool = True
    feed_poll_interval_seconds: float = 30.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
