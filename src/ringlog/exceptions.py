"""
Exception hierarchy for ringlog.
"""


class RinglogError(Exception):
    """Base class for errors raised by ringlog."""


class SinkConstructionError(RinglogError):
    """A sink could not be initialized and cannot be used."""

    def __init__(self, sink: str, reason: str):
        self.sink = sink
        self.reason = reason
        super().__init__(f"{sink} could not be initialized: {reason}")
