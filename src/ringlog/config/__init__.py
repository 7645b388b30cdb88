"""
ringlog Configuration Module.

Each sub-settings class loads from its own environment variable prefix:

    RINGLOG_ENV             development | testing | staging | production
    RINGLOG_LOG_*           logger defaults (level, sinks, file_path, ...)

Usage:
    from ringlog.config import get_settings

    get_settings().environment.default_min_level
    get_settings().logger.sink_names
"""

from functools import cached_property, lru_cache

from .environment import Environment, EnvironmentSettings
from .logger import LogFormat, LoggerSettings


class Settings:
    """Composite of the orthogonal settings domains."""

    @cached_property
    def environment(self) -> EnvironmentSettings:
        return EnvironmentSettings()

    @cached_property
    def logger(self) -> LoggerSettings:
        return LoggerSettings()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return Settings()


__all__ = [
    "Environment",
    "EnvironmentSettings",
    "LogFormat",
    "LoggerSettings",
    "Settings",
    "get_settings",
]
