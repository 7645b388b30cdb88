"""
Logger core: entry construction, history, subscriptions and sink fan-out.
"""

from __future__ import annotations

import asyncio
import inspect
import random
import string
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Sequence

from .diagnostics import ErrorKind, report_error
from .formatters import TextFormatter, dumps, safe_serialize
from .platform import get_platform_info
from .runtime import DispatchLoop
from .sinks import ConsoleSink, stream_for_level
from .types import Formatter, IdGenerator, Listener, LogEntry, LogLevel, PlatformInfo, Sink

DEFAULT_MAX_HISTORY = 200
HISTORY_TAG = "[History]"

_ID_ALPHABET = string.digits + string.ascii_lowercase


def default_id_generator() -> str:
    """``<epoch ms>-<5 random base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=5))
    return f"{time.time_ns() // 1_000_000}-{suffix}"


@dataclass(frozen=True)
class LoggerConfig:
    """
    Construction-time configuration of a ``Logger``.

    Attributes:
        prefix: Label rendered by the default text formatter and history replay.
        max_history: Capacity of the in-memory history (0 keeps nothing).
        min_level: Entries below this level skip the sinks. ``None`` means debug
            (``create_logger`` fills it from the environment instead).
        platform_info: Probe the runtime once and attach it to the default sink.
        sinks: Output sinks. ``None`` means a single console sink.
        formatter: Formatter of the default console sink (default: text).
        default_metadata: Merged under every entry's metadata.
        id_generator: Produces entry ids (default: time + random).
    """

    prefix: str = ""
    max_history: int = DEFAULT_MAX_HISTORY
    min_level: LogLevel | str | None = None
    platform_info: bool = True
    sinks: Sequence[Sink] | None = None
    formatter: Formatter | None = None
    default_metadata: Mapping[str, Any] = field(default_factory=dict)
    id_generator: IdGenerator | None = None


class Logger:
    """
    Dispatches log entries to history, subscribers and sinks.

    ``log`` is synchronous and never fails: the entry is recorded in history
    and handed to subscribers before it returns, and delivery to sinks is
    scheduled on a background loop. Entries below ``min_level`` are kept in
    history and shown to subscribers but never reach the sinks.
    """

    def __init__(self, config: LoggerConfig | None = None):
        config = config or LoggerConfig()
        if config.max_history < 0:
            raise ValueError("max_history must be >= 0")

        self._prefix = config.prefix
        self._min_level = LogLevel.parse(config.min_level) if config.min_level is not None else LogLevel.DEBUG
        self._default_metadata = dict(config.default_metadata)
        self._generate_id = config.id_generator or default_id_generator
        self._platform: PlatformInfo | None = get_platform_info() if config.platform_info else None

        formatter = config.formatter or TextFormatter(config.prefix)
        if config.sinks is None:
            self._sinks: tuple[Sink, ...] = (ConsoleSink(formatter, self._platform),)
        else:
            self._sinks = tuple(config.sinks)

        self._history: deque[LogEntry] = deque(maxlen=config.max_history)
        self._listeners: dict[int, Listener] = {}
        self._lock = threading.RLock()
        self._dispatcher = DispatchLoop()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def platform(self) -> PlatformInfo | None:
        return self._platform

    @property
    def sinks(self) -> tuple[Sink, ...]:
        return self._sinks

    # =========================================================================
    # Logging
    # =========================================================================

    def debug(self, message: str, metadata: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.DEBUG, message, metadata)

    def info(self, message: str, metadata: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.INFO, message, metadata)

    def warn(self, message: str, metadata: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.WARN, message, metadata)

    warning = warn

    def error(self, message: str, metadata: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.ERROR, message, metadata)

    def log(self, level: LogLevel | str, message: str, metadata: Mapping[str, Any] | None = None) -> None:
        level = LogLevel.parse(level)
        if metadata is not None:
            merged = {**self._default_metadata, **metadata}
        else:
            merged = dict(self._default_metadata)

        with self._lock:
            entry = LogEntry(
                id=self._next_id(),
                level=level,
                message=message,
                metadata=MappingProxyType(merged),
                timestamp=time.time_ns() // 1_000_000,
            )
            self._emit(entry)

    def _next_id(self) -> str:
        try:
            return self._generate_id()
        except Exception as exc:
            report_error("Logger", ErrorKind.LISTENER, exc, stage="id_generator")
            return default_id_generator()

    def _emit(self, entry: LogEntry) -> None:
        self._history.append(entry)

        for listener in list(self._listeners.values()):
            try:
                listener(entry)
            except Exception as exc:
                report_error("Logger", ErrorKind.LISTENER, exc, entry_id=entry.id)

        if entry.level.priority < self._min_level.priority or not self._sinks:
            return

        self._dispatcher.submit(self._fan_out(entry))

    async def _fan_out(self, entry: LogEntry) -> None:
        await asyncio.gather(*(self._deliver(sink, entry) for sink in self._sinks))

    async def _deliver(self, sink: Sink, entry: LogEntry) -> None:
        try:
            await _maybe_await(sink.emit(entry))
        except Exception as exc:
            report_error("Logger", ErrorKind.TRANSPORT, exc, sink=type(sink).__name__, entry_id=entry.id)

    # =========================================================================
    # History & subscriptions
    # =========================================================================

    def get_history(self) -> list[LogEntry]:
        """Snapshot of the history, oldest first."""
        with self._lock:
            return list(self._history)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for every new entry; returns its unsubscribe handle."""
        key = id(listener)
        with self._lock:
            self._listeners[key] = listener

        def unsubscribe() -> None:
            with self._lock:
                if self._listeners.get(key) is listener:
                    del self._listeners[key]

        return unsubscribe

    def flush_to_console(self) -> None:
        """Replay the history to the console, tagged so it reads apart from live output."""
        for entry in self.get_history():
            parts = [f"[{self._prefix}]" if self._prefix else "", f"[{entry.level.value.upper()}]", HISTORY_TAG, entry.message]
            formatted = " ".join(part for part in parts if part)

            attachment = {**(entry.metadata or {}), "platform": self._platform_dict()}
            stream = stream_for_level(entry.level)
            stream.write(f"{formatted} {dumps(safe_serialize(attachment))}\n")
            stream.flush()

    def _platform_dict(self) -> dict[str, str] | None:
        if self._platform is None:
            return None
        return {"platform": self._platform.platform, "version": self._platform.version}

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def drain(self) -> None:
        """Wait for every sink delivery scheduled so far."""
        await self._dispatcher.drain()

    async def close(self) -> None:
        """Flush and close every sink. Never raises; safe to call repeatedly."""
        await self._dispatcher.drain()
        try:
            await self._dispatcher.run(self._close_sinks())
        finally:
            self._dispatcher.stop()

    async def _close_sinks(self) -> None:
        await asyncio.gather(*(self._close_sink(sink) for sink in self._sinks))

    async def _close_sink(self, sink: Sink) -> None:
        try:
            flush = getattr(sink, "flush", None)
            if flush is not None:
                await _maybe_await(flush())
            close = getattr(sink, "close", None)
            if close is not None:
                await _maybe_await(close())
        except Exception as exc:
            report_error("Logger", ErrorKind.TRANSPORT, exc, sink=type(sink).__name__, stage="close")

    async def __aenter__(self) -> Logger:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


async def _maybe_await(result: Awaitable[Any] | Any) -> None:
    if inspect.isawaitable(result):
        await result
