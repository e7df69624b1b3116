"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_NUTRITION_MODEL = "qwen2.5-vl-72b-instruct"
DEFAULT_NUTRITION_MAX_TOKENS = 1000


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Credentials are optional so the app starts without them; a missing value
    only fails the call that needs it.
    """

    base_url: str | None = None
    api_key: str | None = None
    nutrition_model: str = DEFAULT_NUTRITION_MODEL
    nutrition_max_tokens: int = DEFAULT_NUTRITION_MAX_TOKENS
    storage_backend: Literal["oss", "supabase"] = "oss"
    oss_region: str | None = None
    oss_access_key_id: str | None = None
    oss_access_secret_key: str | None = None
    bucket_name: str | None = None
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
