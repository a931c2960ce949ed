"""
Configuration and settings for the NutriWise backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.constants import AFFILIATE_TAG


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    cors_origins: List[str] = Field(default=["*"])

    # Firebase (Auth, Firestore, Storage)
    firebase_project_id: Optional[str] = Field(default=None)
    firebase_storage_bucket: Optional[str] = Field(default=None)

    # LLM / Gemini
    gemini_api_key: Optional[str] = Field(default=None)

    # Retailer affiliate tracking tag
    affiliate_tag: str = Field(default=AFFILIATE_TAG)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="NUTRIWISE_USE_IN_MEMORY_BACKENDS"
    )

    # Upstream image fetches
    image_proxy_timeout_seconds: float = Field(default=15.0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
