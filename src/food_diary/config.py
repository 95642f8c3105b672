"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

StorageBackend = Literal["memory", "file", "supabase"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    openai_timeout_seconds: float = 60.0
    estimate_language: str = "English"
    storage_backend: StorageBackend = "file"
    storage_prefix: str = ""
    data_dir: Path = Path(".food_diary")
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_reasoning_effort(raw: str | None) -> str | None:
    """Normalize the reasoning effort setting; blank disables it."""
    if raw is None:
        return None
    cleaned = raw.strip().lower()
    return cleaned or None
