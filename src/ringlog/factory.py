"""
Composition helpers.

The library keeps no module-level logger. Applications create one at their
composition root with ``create_logger`` (explicit configuration, environment
defaults for anything left unset) or ``create_logger_from_settings``
(everything from ``RINGLOG_*`` variables).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from .config import LogFormat, Settings, get_settings
from .core import Logger, LoggerConfig
from .formatters import JSONFormatter, TextFormatter
from .platform import get_platform_info
from .sinks import ConsoleSink, FileSink
from .types import Formatter, LogLevel, Sink


def create_logger(
    config: LoggerConfig | None = None,
    *,
    settings: Settings | None = None,
    **overrides: Any,
) -> Logger:
    """
    Build a logger, taking the minimum level from the environment when it is ``None``.

    Args:
        config: Base configuration. Keyword ``overrides`` replace its fields.
        settings: Settings source (default: process-wide settings).
    """
    settings = settings or get_settings()
    config = config or LoggerConfig()
    if overrides:
        config = replace(config, **overrides)
    if config.min_level is None:
        config = replace(config, min_level=_environment_level(settings))
    return Logger(config)


def create_logger_from_settings(settings: Settings | None = None) -> Logger:
    """Build a logger whose sinks and options all come from ``RINGLOG_LOG_*`` settings."""
    settings = settings or get_settings()
    options = settings.logger

    formatter: Formatter
    if options.format is LogFormat.JSON:
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter(options.prefix)

    platform = get_platform_info() if options.platform_info else None

    sinks: list[Sink] = []
    for name in options.sink_names:
        if name == "console":
            sinks.append(ConsoleSink(formatter, platform))
        elif name == "file":
            sinks.append(
                FileSink(
                    options.file_path,
                    max_file_size=options.max_file_size,
                    max_files=options.max_files,
                    buffer_size=options.buffer_size,
                    formatter=formatter,
                )
            )
        else:
            raise ValueError(f"Unknown sink: {name!r}")

    return Logger(
        LoggerConfig(
            prefix=options.prefix,
            max_history=options.max_history,
            min_level=options.level or _environment_level(settings),
            platform_info=options.platform_info,
            sinks=sinks,
            formatter=formatter,
        )
    )


def _environment_level(settings: Settings) -> LogLevel:
    return settings.logger.level or settings.environment.default_min_level
