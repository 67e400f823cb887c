"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_image_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "medium"
    openai_store: bool = False
    profile_backend: Literal["file", "supabase"] = "file"
    profile_dir: Path = Path.home() / ".can_i_have_this"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_profile_table: str = "profiles"
    session_key: str = "canIHaveThis_user"
    timezone: str = "UTC"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
