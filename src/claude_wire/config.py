"""Configuration management for claude-wire."""

import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Library settings with environment variable support."""

    log_level: str = Field(default="INFO", description="Log level", alias="CLAUDE_WIRE_LOG_LEVEL")

    # Response streams
    stop_stream_on_error: bool = Field(
        default=False,
        description="End a response stream after the first payload that fails to decode",
        alias="CLAUDE_WIRE_STOP_STREAM_ON_ERROR",
    )

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore"}

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get library settings (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.debug(
            f"Loaded settings: log_level={_settings.log_level}, "
            f"stop_stream_on_error={_settings.stop_stream_on_error}"
        )
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
