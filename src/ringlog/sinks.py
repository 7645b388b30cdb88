"""
Sink abstraction and the built-in console and file sinks.
"""

from __future__ import annotations

import asyncio
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, BinaryIO

from .diagnostics import ErrorKind, report_error
from .exceptions import SinkConstructionError
from .formatters import TextFormatter
from .types import Formatter, LogEntry, LogLevel, MaybeAwaitable, PlatformInfo

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_MAX_FILES = 5
DEFAULT_BUFFER_SIZE = 100


def stream_for_level(
    level: LogLevel,
    *,
    stdout: IO[str] | None = None,
    warning: IO[str] | None = None,
    stderr: IO[str] | None = None,
) -> IO[str]:
    """Pick the operator stream for a level; unset streams resolve to the process ones."""
    if level is LogLevel.ERROR:
        return stderr if stderr is not None else sys.stderr
    if level is LogLevel.WARN:
        return warning if warning is not None else sys.stderr
    return stdout if stdout is not None else sys.stdout


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Convenience base class for sinks. ``flush`` and ``close`` default to no-ops."""

    @abstractmethod
    def emit(self, entry: LogEntry) -> MaybeAwaitable:
        """Deliver an entry to the sink."""
        ...

    def flush(self) -> MaybeAwaitable:
        return None

    def close(self) -> MaybeAwaitable:
        return None


class ConsoleSink(BaseSink):
    """Writes formatted entries to the console, routed by level.

    Args:
        formatter: Entry formatter (default: ``TextFormatter()``)
        platform_info: Passed to the formatter with every entry
        stdout / warning / stderr: Override the debug+info, warn and error streams
    """

    def __init__(
        self,
        formatter: Formatter | None = None,
        platform_info: PlatformInfo | None = None,
        *,
        stdout: IO[str] | None = None,
        warning: IO[str] | None = None,
        stderr: IO[str] | None = None,
    ):
        self._formatter = formatter or TextFormatter()
        self._platform_info = platform_info
        self._stdout = stdout
        self._warning = warning
        self._stderr = stderr

    @property
    def platform_info(self) -> PlatformInfo | None:
        return self._platform_info

    def emit(self, entry: LogEntry) -> None:
        output = self._formatter.format(entry, self._platform_info)
        stream = stream_for_level(entry.level, stdout=self._stdout, warning=self._warning, stderr=self._stderr)
        stream.write(output + "\n")
        stream.flush()


class FileSink(BaseSink):
    """
    Buffered file sink with size-based rotation.

    Entries are formatted into an in-memory buffer and written in one payload
    once ``buffer_size`` entries are pending, or on ``flush``/``close``. A write
    that would take the active file past ``max_file_size`` rotates first:
    ``path`` becomes ``path.1``, ``path.1`` becomes ``path.2`` and so on, and the
    copy at ``path.<max_files - 1>`` is deleted.

    Writes are serialized by a FIFO lock and executed off the event loop.
    A failed write is reported and its payload dropped.

    The sink is not thread-safe and its lock binds to the first event loop
    that uses it. Once attached to a ``Logger`` it must be driven only through
    that logger (``drain``/``close``), never awaited directly from another loop.
    """

    def __init__(
        self,
        file_path: str | os.PathLike[str],
        *,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        max_files: int = DEFAULT_MAX_FILES,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        formatter: Formatter | None = None,
    ):
        if max_file_size <= 0:
            raise ValueError("max_file_size must be positive")
        if max_files <= 0:
            raise ValueError("max_files must be positive")
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")

        self._path = Path(file_path)
        self._max_file_size = max_file_size
        self._max_files = max_files
        self._buffer_size = buffer_size
        self._formatter = formatter or TextFormatter()

        self._buffer: list[str] = []
        self._size = 0
        self._closed = False
        self._handle: BinaryIO | None = None
        self._write_lock = asyncio.Lock()

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if self._path.is_dir():
                raise IsADirectoryError(f"{self._path} is a directory")
            if self._path.exists():
                self._size = self._path.stat().st_size
                writable = os.access(self._path, os.W_OK)
            else:
                writable = os.access(self._path.parent, os.W_OK)
            if not writable:
                raise PermissionError(f"{self._path} is not writable")
        except OSError as exc:
            report_error("FileSink", ErrorKind.CONSTRUCTION, exc, path=str(self._path))
            raise SinkConstructionError("FileSink", str(exc)) from exc

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def size(self) -> int:
        """Tracked size in bytes of the active file."""
        return self._size

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def rotated_path(self, index: int) -> Path:
        if index == 0:
            return self._path
        return self._path.with_name(f"{self._path.name}.{index}")

    # -------------------------------------------------------------------------
    # Sink protocol
    # -------------------------------------------------------------------------

    async def emit(self, entry: LogEntry) -> None:
        if self._closed:
            return

        self._buffer.append(self._formatter.format(entry) + "\n")

        if len(self._buffer) >= self._buffer_size:
            await self.flush()

    async def flush(self) -> None:
        if not self._buffer or self._closed:
            return

        # Swap the buffer before writing so entries emitted meanwhile queue up
        # for the next flush.
        payload = "".join(self._buffer).encode("utf-8")
        self._buffer = []

        async with self._write_lock:
            try:
                await asyncio.to_thread(self._commit, payload)
            except Exception as exc:
                report_error(
                    "FileSink",
                    ErrorKind.WRITE,
                    exc,
                    path=str(self._path),
                    dropped_bytes=len(payload),
                )

    async def rotate(self) -> None:
        """Rotate the active file now."""
        async with self._write_lock:
            await asyncio.to_thread(self._rotate_files)

    async def close(self) -> None:
        if self._closed:
            return

        if self._buffer:
            await self.flush()

        self._closed = True

        # Wait for in-flight writes before releasing the handle.
        async with self._write_lock:
            await asyncio.to_thread(self._close_handle)

    # -------------------------------------------------------------------------
    # Blocking helpers (run in a worker thread)
    # -------------------------------------------------------------------------

    def _commit(self, payload: bytes) -> None:
        if self._size + len(payload) > self._max_file_size:
            self._rotate_files()

        handle = self._open_handle()
        handle.write(payload)
        handle.flush()
        self._size += len(payload)

    def _open_handle(self) -> BinaryIO:
        if self._handle is None:
            self._handle = open(self._path, "ab")
        return self._handle

    def _close_handle(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.close()

    def _rotate_files(self) -> None:
        self._close_handle()

        for index in range(self._max_files - 1, -1, -1):
            source = self.rotated_path(index)
            if not source.exists():
                continue
            if index == self._max_files - 1:
                source.unlink()
            else:
                os.replace(source, self.rotated_path(index + 1))

        self._size = 0
