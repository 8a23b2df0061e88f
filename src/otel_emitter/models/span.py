"""
Span models for representing traced operations and their outcomes.
"""

from typing import Dict, Optional, Any
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field

from ..utils import (
    ns_to_datetime,
    calculate_duration_ms,
    format_span_id,
    format_trace_id,
)


class SpanState(str, Enum):
    """Lifecycle of a span: unstarted -> active -> ended."""
    UNSTARTED = "unstarted"
    ACTIVE = "active"
    ENDED = "ended"


class SpanStatus(str, Enum):
    UNSET = "unset"
    OK = "ok"
    ERROR = "error"


class Outcome(BaseModel):
    """How an operation finished."""
    status: SpanStatus = Field(SpanStatus.OK, description="Final status of the operation")
    message: Optional[str] = Field(None, description="Optional status message")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @classmethod
    def ok(cls, message: Optional[str] = None) -> "Outcome":
        return cls(status=SpanStatus.OK, message=message)

    @classmethod
    def error(cls, message: str) -> "Outcome":
        return cls(status=SpanStatus.ERROR, message=message)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Outcome":
        return cls.error(str(exc) or exc.__class__.__name__)

    @property
    def is_error(self) -> bool:
        return self.status == SpanStatus.ERROR


class Span(BaseModel):
    """Represents a single finished span in a trace."""
    span_id: str = Field(..., description="Unique identifier for the span")
    trace_id: str = Field(..., description="Identifier for the trace this span belongs to")
    parent_span_id: Optional[str] = Field(None, description="Identifier of the parent span")
    name: str = Field(..., description="Name of the span")
    start_time: datetime = Field(..., description="Start time of the span")
    end_time: Optional[datetime] = Field(None, description="End time of the span")
    start_time_unix_nano: int = Field(..., description="Start time in unix nanoseconds")
    end_time_unix_nano: Optional[int] = Field(None, description="End time in unix nanoseconds")
    duration_ms: float = Field(..., description="Duration of the span in milliseconds")
    status: SpanStatus = Field(SpanStatus.UNSET, description="Status of the span")
    status_message: Optional[str] = Field(None, description="Status description for error spans")
    attributes: Dict[str, Any] = Field(default_factory=dict, description="Span attributes")
    resource: Dict[str, Any] = Field(default_factory=dict, description="Resource attributes")

    class Config:
        """Pydantic configuration."""
        extra = "allow"

    @property
    def is_error(self) -> bool:
        return self.status == SpanStatus.ERROR

    @classmethod
    def from_readable_span(cls, readable) -> "Span":
        """
        Build a Span from an SDK ReadableSpan.

        Args:
            readable: opentelemetry.sdk.trace.ReadableSpan

        Returns:
            Span model
        """
        span_context = readable.context
        parent = readable.parent
        status_code = readable.status.status_code.name.lower()

        return cls(
            span_id=format_span_id(span_context.span_id),
            trace_id=format_trace_id(span_context.trace_id),
            parent_span_id=format_span_id(parent.span_id) if parent is not None else None,
            name=readable.name,
            start_time=ns_to_datetime(readable.start_time),
            end_time=ns_to_datetime(readable.end_time),
            start_time_unix_nano=readable.start_time,
            end_time_unix_nano=readable.end_time,
            duration_ms=calculate_duration_ms(readable.start_time, readable.end_time),
            status=SpanStatus(status_code),
            status_message=readable.status.description,
            attributes=dict(readable.attributes or {}),
            resource=dict(readable.resource.attributes) if readable.resource else {},
        )
