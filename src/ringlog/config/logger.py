"""
Logger Configuration.
"""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..sinks import DEFAULT_BUFFER_SIZE, DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_FILES
from ..types import LogLevel


class LogFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


class LoggerSettings(BaseSettings):
    """Settings for loggers built by ``create_logger_from_settings``."""

    model_config = SettingsConfigDict(
        env_prefix="RINGLOG_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    prefix: str = Field(default="", description="Prefix rendered before the level")
    level: LogLevel | None = Field(default=None, description="Minimum level; unset follows the environment")
    max_history: int = Field(default=200, ge=0, description="In-memory history capacity")
    platform_info: bool = Field(default=True, description="Attach runtime platform info")
    format: LogFormat = Field(default=LogFormat.TEXT, description="Output format")
    sinks: str = Field(default="console", description="Comma-separated sink names (console, file)")
    file_path: str = Field(default="logs/ringlog.log", description="Path for file sink")
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, gt=0, description="Rotation threshold in bytes")
    max_files: int = Field(default=DEFAULT_MAX_FILES, gt=0, description="Retention cap for rotated files")
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0, description="Entries buffered before a write")

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: object) -> object:
        if value is None or value == "":
            return None
        return LogLevel.parse(value)  # type: ignore[arg-type]

    @property
    def sink_names(self) -> list[str]:
        return [name.strip().lower() for name in self.sinks.split(",") if name.strip()]
