"""Process-wide engine settings loaded from the environment."""

from __future__ import annotations

from functools import cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EngineSettings(BaseSettings):
    """Centralized settings for the engine runtime."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SANTORINI_",
        extra="ignore",
    )

    log_level: LogLevel = "WARNING"
    log_json: bool = False
    journal_limit: int | None = Field(default=500, ge=1)


@cache
def get_settings() -> EngineSettings:
    """Return the cached settings instance."""

    return EngineSettings()


__all__ = ["EngineSettings", "LogLevel", "get_settings"]
