import os
import typing as t

import pytest

from ringlog import LogEntry, LogLevel


class RecordingSink:
    """Sink that keeps every entry it receives."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []
        self.flushed = 0
        self.closed = 0

    def emit(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def flush(self) -> None:
        self.flushed += 1

    def close(self) -> None:
        self.closed += 1


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_entry() -> t.Callable[..., LogEntry]:
    def _make(
        message: str = "Test message",
        level: LogLevel = LogLevel.INFO,
        entry_id: str = "test-1",
        metadata: t.Mapping[str, t.Any] | None = None,
        timestamp: int = 1_700_000_000_123,
    ) -> LogEntry:
        return LogEntry(id=entry_id, level=level, message=message, timestamp=timestamp, metadata=metadata)

    return _make


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep RINGLOG_* variables and stray .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("RINGLOG_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
