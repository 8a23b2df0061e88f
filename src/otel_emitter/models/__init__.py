"""
Core data models for emitted telemetry.
"""

from .span import Span, SpanState, SpanStatus, Outcome
from .trace import Trace
from .log_record import LogEntry, Severity
from .metric import InstrumentKind, InstrumentSpec, MetricPoint, points_from_metrics_data
from .resource import ResourceAttributes

__all__ = [
    "Span",
    "SpanState",
    "SpanStatus",
    "Outcome",
    "Trace",
    # Logs
    "LogEntry",
    "Severity",
    # Metrics
    "InstrumentKind",
    "InstrumentSpec",
    "MetricPoint",
    "points_from_metrics_data",
    # Resource
    "ResourceAttributes",
]
