"""
Application configuration using pydantic-settings.

All environment variables are read through the Settings class and use the
``CODE_HIGHLIGHTER_`` prefix (e.g. ``CODE_HIGHLIGHTER_DEFAULT_COLOR``).
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#FFFF0066"

DEFAULT_PALETTE = [
    "#FFFF0066",
    "#00FF0066",
    "#FF00FF66",
    "#00FFFF66",
    "#FFA50066",
]


class Settings(BaseSettings):
    """Runtime settings for the highlight service."""

    model_config = SettingsConfigDict(
        env_prefix="CODE_HIGHLIGHTER_",
        env_file=".env",
        extra="ignore",
    )

    default_color: str = DEFAULT_COLOR
    colors: list[str] = list(DEFAULT_PALETTE)

    db_path: str = "data/highlights.db"
    state_key: str = "highlights"

    log_level: str = "INFO"
    log_file: Path | None = None

    host: str = "127.0.0.1"
    port: int = 8000

    # Browser origins allowed to call the API (JSON list in env); none by default
    # since export/import take paths on the local filesystem
    cors_origins: list[str] = []

    @field_validator("default_color")
    @classmethod
    def _default_color_not_blank(cls, value: str) -> str:
        # An empty value in the environment falls back to the built-in yellow
        return value.strip() or DEFAULT_COLOR

    @field_validator("colors")
    @classmethod
    def _colors_not_empty(cls, value: list[str]) -> list[str]:
        cleaned = [color.strip() for color in value if color.strip()]
        return cleaned or [DEFAULT_COLOR]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()
    logger.info(
        f"Settings loaded: db_path={settings.db_path}, "
        f"default_color={settings.default_color}, {len(settings.colors)} colors"
    )
    return settings
