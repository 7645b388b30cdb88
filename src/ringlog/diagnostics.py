"""
Operator error channel.

Failures inside listeners and sinks never reach the caller of a logging
method. They are reported here instead, as structlog events tagged with the
component that failed and the kind of failure.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import Any

import structlog


class ErrorKind(str, Enum):
    LISTENER = "listener-error"
    TRANSPORT = "transport-error"
    WRITE = "write-error"
    CONSTRUCTION = "construction-error"


class _StderrProxy:
    """File-like object that resolves ``sys.stderr`` on every write."""

    def write(self, s: str) -> None:
        sys.stderr.write(s)

    def flush(self) -> None:
        sys.stderr.flush()


# Processors are left unset so the host's structlog configuration applies.
_log = structlog.wrap_logger(structlog.PrintLogger(file=_StderrProxy()), logger_name="ringlog")


def report_error(component: str, kind: ErrorKind, error: BaseException, **context: Any) -> None:
    """Report a contained failure. Never raises."""
    try:
        _log.error(
            f"{component} {kind.value}",
            component=component,
            kind=kind.value,
            error=repr(error),
            exc_info=error,
            **context,
        )
    except Exception:
        # Last resort: the error channel itself must not break logging.
        try:
            sys.stderr.write(f"[{component}] {kind.value}: {error!r}\n")
        except Exception:
            pass
