"""Settings for the optional ``configure_logging`` setup."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Log output settings, read from ``LOG_*`` variables.

    Example: LOG_LEVEL=debug LOG_JSON=false
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root logger level",
    )
    json: bool = Field(default=True, description="Emit JSON Lines instead of plain text")
    include_trace_ids: bool = Field(
        default=True,
        description="Add OpenTelemetry trace_id/span_id to JSON records",
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @property
    def level_int(self) -> int:
        """Numeric value of ``level``."""
        return logging.getLevelName(self.level)
