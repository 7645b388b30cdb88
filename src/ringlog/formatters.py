"""
Entry formatters.

Both formatters are stateless apart from their construction arguments and
render one entry to one line.
"""

from __future__ import annotations

import dataclasses
import traceback
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

import orjson

from .types import LogEntry, PlatformInfo

CIRCULAR_REFERENCE = "[Circular Reference]"
FUNCTION_PLACEHOLDER = "[Function]"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_INT_MIN = -(2**63)
_INT_MAX = 2**64 - 1


# =============================================================================
# Serialization helpers
# =============================================================================


def to_iso8601(timestamp_ms: int) -> str:
    """Render epoch milliseconds as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    dt = _EPOCH + timedelta(milliseconds=timestamp_ms)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _describe_exception(exc: BaseException) -> dict[str, Any]:
    stack = None
    if exc.__traceback__ is not None:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return {"name": type(exc).__name__, "message": str(exc), "stack": stack}


def safe_serialize(value: Any) -> Any:
    """
    Convert ``value`` into a structure orjson can always encode.

    Containers and dataclass instances already being visited are replaced by
    ``CIRCULAR_REFERENCE``; exceptions become ``{name, message, stack}``,
    callables ``"[Function]"`` and integers wider than 64 bits strings.
    """
    return _convert(value, set())


def _convert(value: Any, ancestors: set[int]) -> Any:
    if value is None or isinstance(value, (str, float, bool)):
        return value
    if isinstance(value, int):
        # orjson only encodes 64-bit integers.
        return value if _INT_MIN <= value <= _INT_MAX else str(value)
    if isinstance(value, BaseException):
        return _describe_exception(value)
    is_instance = dataclasses.is_dataclass(value) and not isinstance(value, type)
    if is_instance or isinstance(value, (Mapping, list, tuple, set, frozenset)):
        marker = id(value)
        if marker in ancestors:
            return CIRCULAR_REFERENCE
        ancestors.add(marker)
        try:
            if is_instance:
                return {f.name: _convert(getattr(value, f.name), ancestors) for f in dataclasses.fields(value)}
            if isinstance(value, Mapping):
                return {str(k): _convert(v, ancestors) for k, v in value.items()}
            return [_convert(item, ancestors) for item in value]
        finally:
            ancestors.discard(marker)
    if isinstance(value, type) or callable(value):
        return FUNCTION_PLACEHOLDER
    return value


def _default(obj: Any) -> Any:
    return str(obj)


def dumps(value: Any) -> str:
    """Compact JSON for an already safe structure."""
    return orjson.dumps(value, default=_default, option=orjson.OPT_NON_STR_KEYS).decode()


# =============================================================================
# Formatters
# =============================================================================


class TextFormatter:
    """Human-readable rendering: ``[prefix][LEVEL] message {metadata} [platform/version]``."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def format(self, entry: LogEntry, platform_info: PlatformInfo | None = None) -> str:
        prefix_part = f"[{self.prefix}]" if self.prefix else ""
        formatted = f"{prefix_part}[{entry.level.value.upper()}] {entry.message}"

        if entry.metadata:
            formatted += f" {dumps(safe_serialize(entry.metadata))}"

        if platform_info is not None:
            formatted += f" [{platform_info.platform}/{platform_info.version}]"

        return formatted


class JSONFormatter:
    """Single-line JSON object per entry, safe against cycles and odd values."""

    def format(self, entry: LogEntry, platform_info: PlatformInfo | None = None) -> str:
        record: dict[str, Any] = {
            "timestamp": to_iso8601(entry.timestamp),
            "level": entry.level.value,
            "message": entry.message,
            "id": entry.id,
        }
        if entry.metadata is not None:
            record["metadata"] = safe_serialize(entry.metadata)
        if platform_info is not None:
            record["platform"] = {"name": platform_info.platform, "version": platform_info.version}
        return dumps(record)
