"""Application configuration utilities."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_KEY = "DEMO_KEY"


class Settings(BaseSettings):
    """Centralized configuration loaded from environment or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    nasa_api_key: Optional[str] = Field(default=None, alias="NASA_API_KEY")
    request_timeout: int = Field(default=30, alias="NASA_REQUEST_TIMEOUT")
    image_root: Path = Field(default_factory=lambda: Path.home() / "Desktop", alias="NASA_IMAGE_ROOT")
    display_pause: float = Field(default=2.0, alias="NASA_DISPLAY_PAUSE")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


def resolve_api_key(api_key: Optional[str] = None) -> str:
    """Pick the explicit key, then the configured one, then the public demo key."""
    return api_key or get_settings().nasa_api_key or DEFAULT_API_KEY
