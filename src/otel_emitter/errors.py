"""
Exception types raised by the telemetry emission session.
"""

from typing import List, Optional


class TelemetryError(Exception):
    """Base class for all otel_emitter errors."""


class InitializationError(TelemetryError):
    """The export transport could not be established. Startup must abort."""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        super().__init__(message)
        self.endpoint = endpoint


class ExportDrainError(TelemetryError):
    """
    One or more producers did not drain their buffers before the shutdown deadline.

    This is reported, not fatal: the session is closed regardless.
    """

    def __init__(self, failed_producers: List[str], timeout_seconds: Optional[float] = None):
        self.failed_producers = list(failed_producers)
        self.timeout_seconds = timeout_seconds
        message = f"Failed to drain producers: {', '.join(self.failed_producers)}"
        if timeout_seconds is not None:
            message += f" (timeout {timeout_seconds}s)"
        super().__init__(message)


class SpanStateError(TelemetryError):
    """A span was driven through an illegal state transition (e.g. ended twice)."""


class SessionClosedError(TelemetryError):
    """Telemetry was emitted after the session was shut down."""


class InvalidMeasurementError(TelemetryError, ValueError):
    """A measurement was rejected before it reached the instrument."""
