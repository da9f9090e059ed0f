"""
doctable.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for engines, logging and document storage.
- Offer a cached settings instance shared by tables and session helpers.
"""

from __future__ import annotations

import enum
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentFormat(enum.StrEnum):
    # Stored form of the `data` column.
    auto = "auto"
    json = "json"
    jsonb = "jsonb"


class Settings(BaseSettings):
    """
    Settings are read from `DOCTABLE_*` environment variables.
    Defaults target a local SQLite file in the working directory.
    """

    model_config = SettingsConfigDict(env_prefix="DOCTABLE_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "doctable"
    log_level: str = "INFO"

    # Persistence
    database_url: str = "sqlite:///./doctable.db"
    async_database_url: str = "sqlite+aiosqlite:///./doctable.db"
    busy_timeout_seconds: float = Field(default=5.0, ge=0)
    echo_sql: bool = False

    # `auto` resolves against the linked SQLite library when a table is built.
    document_format: DocumentFormat = DocumentFormat.auto


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tables read `document_format` once at construction; changing the env afterwards
# requires `get_settings.cache_clear()` and new table objects.
