"""
@file_name: settings.py
@author: NetMind.AI
@date: 2026-10-12
@description: Client configuration

Uses pydantic-settings to read client defaults from environment variables or a
local .env file. Explicit constructor arguments always take precedence.

Environment variables:
    SKALD_API_KEY   API key used when Skald() is created without one
    SKALD_BASE_URL  API base URL (default: https://api.useskald.com)
    SKALD_TIMEOUT   Request timeout in seconds (default: unset, no timeout)

Usage:
    from skald.settings import settings

    base_url = settings.base_url
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BASE_URL = "https://api.useskald.com"


class SkaldSettings(BaseSettings):
    """Client defaults, automatically loaded from .env file and environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="SKALD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL

    # None leaves deadlines to the caller
    timeout: Optional[float] = None


class ClientConfig(BaseModel):
    """
    Immutable per-client configuration

    The base URL is normalized once here (a single trailing slash removed), so
    request paths can always be appended with a leading slash.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str
    base_url: str = DEFAULT_BASE_URL

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        if value.endswith("/"):
            return value[:-1]
        return value


settings = SkaldSettings()
