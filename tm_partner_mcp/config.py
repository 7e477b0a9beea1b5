"""Application configuration loader."""

from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.ticketmaster.com/partners/v2"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Configuration loaded from environment variables."""

    TM_PARTNER_API_KEY: str
    TM_PARTNER_API_SECRET: str
    TM_PARTNER_BASE_URL: str = DEFAULT_BASE_URL

    SERVER_NAME: str = "mcp-server-tm-partner"
    SERVER_VERSION: str = "0.1.0"

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ERROR_TRACKING_DSN: Optional[str] = None

    @field_validator("TM_PARTNER_API_KEY", "TM_PARTNER_API_SECRET")
    @classmethod
    def validate_credential(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Partner API credentials must not be empty")
        return value

    @field_validator("TM_PARTNER_BASE_URL")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("TM_PARTNER_BASE_URL must start with http:// or https://")
        return value.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}")
        return level

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        extra="ignore",
    )


def load_settings(**overrides) -> Settings:
    """Read ``.env`` and the environment into a :class:`Settings` value.

    Raises :class:`pydantic.ValidationError` when either credential is
    missing; entry points treat that as fatal.
    """
    load_dotenv()
    return Settings(**overrides)


__all__ = ["Settings", "load_settings", "DEFAULT_BASE_URL"]
