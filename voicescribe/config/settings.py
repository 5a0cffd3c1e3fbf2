from __future__ import annotations

"""Application settings using Pydantic Settings.

Loads configuration from environment variables and optional .env file.
The instance is frozen: it is built once at process entry and handed to
each component explicitly.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


WEBHOOK_PATH = "/telegram-webhook"


class Settings(BaseSettings):
    """Top-level application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3001

    # Telegram; bot is disabled without a token
    bot_token: Optional[str] = None
    webhook_url: Optional[str] = None  # public base, e.g. https://example.com
    webhook_background: bool = True

    # ElevenLabs
    elevenlabs_api_key: Optional[str] = None
    elevenlabs_base_url: str = "https://api.elevenlabs.io"
    elevenlabs_model_id: str = "scribe_v1"
    transcription_timeout_seconds: float = 300.0

    # Remote media
    download_timeout_seconds: float = 60.0
    max_download_bytes: int = 25 * 1024 * 1024

    # Transient uploads
    upload_dir: Path = Path("uploads")

    # Logging
    log_level: str = "INFO"

    @field_validator("bot_token", "webhook_url", "elevenlabs_api_key", mode="before")
    @classmethod
    def _blank_is_unset(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in levels:
            raise ValueError("Invalid LOG_LEVEL")
        return v.upper()

    @field_validator("max_download_bytes")
    @classmethod
    def _positive_cap(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("MAX_DOWNLOAD_BYTES must be positive")
        return v

    @property
    def bot_enabled(self) -> bool:
        return self.bot_token is not None

    @property
    def webhook_endpoint(self) -> Optional[str]:
        """Full callback URL Telegram should push updates to."""

        if not self.webhook_url:
            return None
        return self.webhook_url.rstrip("/") + WEBHOOK_PATH


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""

    return Settings()
