"""
Trace inspection over captured spans: lookups by id, parent/child navigation, trace summaries.
"""

from typing import Dict, List, Optional
from collections import defaultdict
import logging

from .models import Span, Trace

logger = logging.getLogger(__name__)


class TraceInspector:
    """
    Rebuilds span trees from a span source.

    The source is anything exposing finished_spans() -> List[Span], such as
    InMemoryTransport.
    """

    def __init__(self, span_source):
        """
        Initialize the TraceInspector.

        Args:
            span_source: Object providing finished_spans()
        """
        self.span_source = span_source
        self.logger = logging.getLogger(self.__class__.__name__)

    def spans(self) -> List[Span]:
        return self.span_source.finished_spans()

    def get_span_by_id(self, span_id: str) -> Optional[Span]:
        """
        Get a span by its ID.

        Args:
            span_id: The span ID to retrieve (hex)

        Returns:
            Span object or None if not found
        """
        for span in self.spans():
            if span.span_id == span_id:
                return span
        self.logger.warning(f"Span with ID '{span_id}' not found")
        return None

    def get_child_spans(self, parent_span_id: str, name: Optional[str] = None) -> List[Span]:
        """
        Get all child spans of a given parent span, ordered by start time.

        Args:
            parent_span_id: The parent span ID
            name: Optional filter on span name

        Returns:
            List of Span objects
        """
        children = [
            span for span in self.spans()
            if span.parent_span_id == parent_span_id and (name is None or span.name == name)
        ]
        children.sort(key=lambda span: span.start_time_unix_nano)
        self.logger.debug(f"Found {len(children)} child spans for parent span '{parent_span_id}'")
        return children

    def get_root_spans(self) -> List[Span]:
        roots = [span for span in self.spans() if span.parent_span_id is None]
        roots.sort(key=lambda span: span.start_time_unix_nano)
        return roots

    def traces(self) -> Dict[str, Trace]:
        grouped: Dict[str, List[Span]] = defaultdict(list)
        for span in self.spans():
            grouped[span.trace_id].append(span)
        return {trace_id: Trace.from_spans(trace_id, spans) for trace_id, spans in grouped.items()}

    def build_trace(self, trace_id: str) -> Optional[Trace]:
        """
        Summarize all captured spans of one trace.

        Args:
            trace_id: The trace ID (hex)

        Returns:
            Trace object or None if no span belongs to it
        """
        spans = [span for span in self.spans() if span.trace_id == trace_id]
        if not spans:
            self.logger.warning(f"No spans found for trace '{trace_id}'")
            return None
        return Trace.from_spans(trace_id, spans)
