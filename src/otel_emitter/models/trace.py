"""
Trace model for representing complete traces as trees of spans.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from .span import Span


class Trace(BaseModel):
    """Represents a complete trace as a tree of spans."""
    trace_id: str = Field(..., description="Unique identifier for the trace")
    spans: List[Span] = Field(default_factory=list, description="List of spans in the trace")
    total_duration_ms: float = Field(..., description="Total duration of the trace in milliseconds")
    span_count: int = Field(..., description="Number of spans in the trace")
    error_count: int = Field(..., description="Number of spans with errors")

    class Config:
        """Pydantic configuration."""
        extra = "allow"

    @classmethod
    def from_spans(cls, trace_id: str, spans: List[Span]) -> "Trace":
        """Summarize the spans belonging to one trace, ordered by start time."""
        ordered = sorted(spans, key=lambda span: span.start_time_unix_nano)
        if ordered:
            first_start = ordered[0].start_time_unix_nano
            last_end = max(span.end_time_unix_nano or span.start_time_unix_nano for span in ordered)
            total_duration_ms = (last_end - first_start) / 1e6
        else:
            total_duration_ms = 0.0

        return cls(
            trace_id=trace_id,
            spans=ordered,
            total_duration_ms=total_duration_ms,
            span_count=len(ordered),
            error_count=sum(1 for span in ordered if span.is_error),
        )

    @property
    def root(self) -> Optional[Span]:
        span_ids = {span.span_id for span in self.spans}
        for span in self.spans:
            if span.parent_span_id is None or span.parent_span_id not in span_ids:
                return span
        return None

    def children_of(self, span_id: str) -> List[Span]:
        return [span for span in self.spans if span.parent_span_id == span_id]
