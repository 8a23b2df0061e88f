"""
In-memory transport that captures telemetry instead of sending it anywhere.
"""

from typing import List, Optional
import logging

from opentelemetry.sdk._logs.export import InMemoryLogRecordExporter
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from .interfaces import ExportTransport
from ..models import LogEntry, MetricPoint, Span, points_from_metrics_data

logger = logging.getLogger(__name__)


class InMemoryTransport(ExportTransport):
    """
    Captures exported spans and logs in memory and collects metrics on demand.

    Spans and logs become visible once the session's batch processors flush them
    (TelemetrySession.force_flush or shutdown). Metrics are collected, and gauge
    callbacks invoked, each time metric_points() is called.
    """

    def __init__(self):
        self.span_exporter = InMemorySpanExporter()
        self.log_exporter = InMemoryLogRecordExporter()
        self.metric_reader = InMemoryMetricReader()
        self.connected = False
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def description(self) -> str:
        return "in-memory"

    def connect(self) -> None:
        self.connected = True

    def test_connection(self) -> bool:
        return True

    def create_span_exporter(self) -> InMemorySpanExporter:
        return self.span_exporter

    def create_log_exporter(self) -> InMemoryLogRecordExporter:
        return self.log_exporter

    def create_metric_reader(self, export_interval_millis: int) -> InMemoryMetricReader:
        # Pull-only reader; the interval does not apply.
        return self.metric_reader

    def finished_spans(self) -> List[Span]:
        return [Span.from_readable_span(span) for span in self.span_exporter.get_finished_spans()]

    def finished_logs(self) -> List[LogEntry]:
        return [LogEntry.from_sdk_record(record) for record in self.log_exporter.get_finished_logs()]

    def metric_points(self, name: Optional[str] = None) -> List[MetricPoint]:
        """
        Collect current metric state.

        Args:
            name: Only return points of this instrument

        Returns:
            List of MetricPoint models (empty once the reader is shut down)
        """
        return points_from_metrics_data(self.metric_reader.get_metrics_data(), name)

    def clear(self) -> None:
        self.span_exporter.clear()
        self.log_exporter.clear()
