"""
ringlog: embeddable structured logging.

Leveled logging with a bounded in-memory history, live subscriptions and
pluggable sinks:
- console: level-routed stdout/stderr output
- file: buffered writes with size-based rotation

Library: structlog for internal diagnostics, orjson for JSON rendering,
pydantic-settings for environment configuration.
"""

from .core import Logger, LoggerConfig, default_id_generator
from .diagnostics import ErrorKind
from .exceptions import RinglogError, SinkConstructionError
from .factory import create_logger, create_logger_from_settings
from .formatters import JSONFormatter, TextFormatter
from .platform import get_platform_info
from .sinks import BaseSink, ConsoleSink, FileSink
from .types import Formatter, Listener, LogEntry, LogLevel, PlatformInfo, Sink

__all__ = [
    "BaseSink",
    "ConsoleSink",
    "ErrorKind",
    "FileSink",
    "Formatter",
    "JSONFormatter",
    "Listener",
    "LogEntry",
    "LogLevel",
    "Logger",
    "LoggerConfig",
    "PlatformInfo",
    "RinglogError",
    "Sink",
    "SinkConstructionError",
    "TextFormatter",
    "create_logger",
    "create_logger_from_settings",
    "default_id_generator",
    "get_platform_info",
]
