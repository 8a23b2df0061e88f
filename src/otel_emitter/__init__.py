"""
otel_emitter - A minimal telemetry emission session built on OpenTelemetry.

This package provides tools and utilities for:
- Emitting correlated spans, log records and metrics against an explicit execution context
- Owning the span, log and metric producers of one process run
- Flushing buffered telemetry to an OTLP/gRPC collector before the process exits
- Capturing telemetry in memory and inspecting the resulting span trees
"""

__version__ = "0.1.0"

from .config import SessionConfig, resolve_endpoint
from .context import ExecutionContext
from .errors import (
    TelemetryError,
    InitializationError,
    ExportDrainError,
    SpanStateError,
    SessionClosedError,
    InvalidMeasurementError,
)
from .instruments import MetricInstrument
from .models import (
    Span,
    SpanState,
    SpanStatus,
    Outcome,
    Trace,
    LogEntry,
    Severity,
    InstrumentKind,
    InstrumentSpec,
    MetricPoint,
    ResourceAttributes,
)
from .operation import SpanHandle
from .session import TelemetrySession
from .trace_inspector import TraceInspector
from .transports import ExportTransport, OtlpGrpcConfig, OtlpGrpcTransport, InMemoryTransport

__all__ = [
    "TelemetrySession",
    "SessionConfig",
    "resolve_endpoint",
    "ExecutionContext",
    "SpanHandle",
    "MetricInstrument",
    "TraceInspector",
    # Transports
    "ExportTransport",
    "OtlpGrpcConfig",
    "OtlpGrpcTransport",
    "InMemoryTransport",
    # Models
    "Span",
    "SpanState",
    "SpanStatus",
    "Outcome",
    "Trace",
    "LogEntry",
    "Severity",
    "InstrumentKind",
    "InstrumentSpec",
    "MetricPoint",
    "ResourceAttributes",
    # Errors
    "TelemetryError",
    "InitializationError",
    "ExportDrainError",
    "SpanStateError",
    "SessionClosedError",
    "InvalidMeasurementError",
]
