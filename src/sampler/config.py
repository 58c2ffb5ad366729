"""Application configuration handling."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Sampler feed service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "development"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 3001
    cors_allow_origins: List[str] = ["*"]

    database_url: str = "sqlite+aiosqlite:///./sampler.db"

    feed_host: str = "https://www.youtube.com"
    feed_timeout_seconds: float = 10.0
    ingest_concurrency: int = 15

    scheduler_enabled: bool = True
    ingest_interval_minutes: int = 60


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
