"""
Environment Configuration.

The environment is read from ``RINGLOG_ENV`` and decides the default
minimum level handed to new loggers.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..types import LogLevel

Environment = Literal["development", "testing", "staging", "production"]


class EnvironmentSettings(BaseSettings):
    """Environment detection."""

    model_config = SettingsConfigDict(
        env_prefix="RINGLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    env: Environment = Field(
        default="production",
        description="Current environment (development, testing, staging, production)",
    )

    @property
    def is_development(self) -> bool:
        return self.env in ("development", "testing")

    @property
    def default_min_level(self) -> LogLevel:
        """Everything in development and tests, warnings and errors elsewhere."""
        return LogLevel.DEBUG if self.is_development else LogLevel.WARN
