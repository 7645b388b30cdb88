"""
Core types shared by the dispatcher, formatters and sinks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Protocol, runtime_checkable


class LogLevel(str, Enum):
    """Severity of a log entry, ordered debug < info < warn < error."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def priority(self) -> int:
        return LEVEL_PRIORITY[self]

    @classmethod
    def parse(cls, value: LogLevel | str) -> LogLevel:
        """Resolve a level from an enum member or a case-insensitive name."""
        if isinstance(value, LogLevel):
            return value
        name = str(value).strip().lower()
        if name == "warning":
            return cls.WARN
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown log level: {value!r}") from None


LEVEL_PRIORITY: dict[LogLevel, int] = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARN: 2,
    LogLevel.ERROR: 3,
}


@dataclass(frozen=True)
class PlatformInfo:
    """Runtime the logger is embedded in, resolved once per logger."""

    platform: str
    version: str


@dataclass(frozen=True)
class LogEntry:
    """
    Immutable record of a single log call.

    Created once by the dispatcher and shared by reference with history,
    listeners and sinks.

    Attributes:
        id: Unique entry id from the logger's id generator.
        level: Severity of the call.
        message: Caller-supplied text.
        timestamp: Milliseconds since the Unix epoch.
        metadata: Read-only merge of default and call metadata.
    """

    id: str
    level: LogLevel
    message: str
    timestamp: int
    metadata: Mapping[str, Any] | None = None


Listener = Callable[[LogEntry], Any]
IdGenerator = Callable[[], str]
MaybeAwaitable = Awaitable[None] | None


class Formatter(Protocol):
    """Renders an entry to a single string."""

    def format(self, entry: LogEntry, platform_info: PlatformInfo | None = None) -> str: ...


@runtime_checkable
class Sink(Protocol):
    """
    Output destination for entries.

    Only ``emit`` is required. ``flush`` and ``close`` are optional and are
    looked up at call time; any of the three may return an awaitable.
    """

    def emit(self, entry: LogEntry) -> MaybeAwaitable: ...
