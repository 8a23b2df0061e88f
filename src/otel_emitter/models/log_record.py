"""
Log record model and severity levels.
"""

from typing import Dict, Optional, Any
from datetime import datetime
from enum import IntEnum
from pydantic import BaseModel, Field

from opentelemetry import trace
from opentelemetry._logs import SeverityNumber

from ..utils import ns_to_datetime, format_span_id, format_trace_id


class Severity(IntEnum):
    """Log severity. Values match the OpenTelemetry severity numbers, so ordering holds."""
    DEBUG = 5
    INFO = 9
    WARN = 13
    ERROR = 17

    @property
    def severity_number(self) -> SeverityNumber:
        return SeverityNumber(self.value)

    @classmethod
    def from_severity_number(cls, number: Optional[SeverityNumber]) -> "Severity":
        """Map any SDK severity number onto the closest level at or below it."""
        if number is None:
            return cls.INFO
        value = int(number.value if isinstance(number, SeverityNumber) else number)
        for level in sorted(cls, reverse=True):
            if value >= level.value:
                return level
        return cls.DEBUG


class LogEntry(BaseModel):
    """A timestamped log message, optionally correlated to a span."""
    timestamp: datetime = Field(..., description="Time the record was emitted")
    timestamp_unix_nano: int = Field(..., description="Emission time in unix nanoseconds")
    severity: Severity = Field(..., description="Severity level")
    body: str = Field(..., description="Log message")
    attributes: Dict[str, Any] = Field(default_factory=dict, description="Log attributes")
    trace_id: Optional[str] = Field(None, description="Trace of the active span, if any")
    span_id: Optional[str] = Field(None, description="Active span at emission time, if any")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @classmethod
    def from_sdk_record(cls, record) -> "LogEntry":
        """
        Build a LogEntry from an exported SDK log record.

        Args:
            record: SDK log record (or a LogData wrapper around one)

        Returns:
            LogEntry model
        """
        record = getattr(record, "log_record", record)
        trace_id = getattr(record, "trace_id", None) or None
        span_id = getattr(record, "span_id", None) or None
        if span_id is None and getattr(record, "context", None) is not None:
            span_context = trace.get_current_span(record.context).get_span_context()
            if span_context.is_valid:
                trace_id, span_id = span_context.trace_id, span_context.span_id
        timestamp_ns = record.timestamp or record.observed_timestamp

        return cls(
            timestamp=ns_to_datetime(timestamp_ns),
            timestamp_unix_nano=timestamp_ns,
            severity=Severity.from_severity_number(record.severity_number),
            body=str(record.body),
            attributes=dict(record.attributes or {}),
            trace_id=format_trace_id(trace_id) if trace_id else None,
            span_id=format_span_id(span_id) if span_id else None,
        )
