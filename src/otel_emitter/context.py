"""
Explicit execution context carrying the active span.
"""

from typing import Optional

from opentelemetry import trace
from opentelemetry.context import Context

from .utils import format_span_id, format_trace_id


class ExecutionContext:
    """
    Immutable handle on the currently active span.

    Entering a span produces a new ExecutionContext; the parent is never
    mutated and the global OpenTelemetry context is never touched.
    """

    __slots__ = ("_otel_context",)

    def __init__(self, otel_context: Optional[Context] = None):
        self._otel_context = otel_context if otel_context is not None else Context()

    @classmethod
    def empty(cls) -> "ExecutionContext":
        return cls()

    @property
    def otel_context(self) -> Context:
        return self._otel_context

    @property
    def active_span(self) -> Optional[trace.Span]:
        span = trace.get_current_span(self._otel_context)
        if not span.get_span_context().is_valid:
            return None
        return span

    @property
    def trace_id(self) -> Optional[str]:
        span = self.active_span
        if span is None:
            return None
        return format_trace_id(span.get_span_context().trace_id)

    @property
    def span_id(self) -> Optional[str]:
        span = self.active_span
        if span is None:
            return None
        return format_span_id(span.get_span_context().span_id)

    def with_span(self, span: trace.Span) -> "ExecutionContext":
        return ExecutionContext(trace.set_span_in_context(span, self._otel_context))

    def __repr__(self) -> str:
        return f"ExecutionContext(trace_id={self.trace_id}, span_id={self.span_id})"
