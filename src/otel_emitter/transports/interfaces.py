"""
Interfaces for export transports.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from opentelemetry.sdk._logs.export import LogExporter
    from opentelemetry.sdk.metrics.export import MetricReader
    from opentelemetry.sdk.trace.export import SpanExporter


class ExportTransport(ABC):
    """Abstract interface for the outbound transport shared by the three producers."""

    @abstractmethod
    def connect(self) -> None:
        """
        Establish the transport, blocking at most the configured connect timeout.

        Raises:
            InitializationError: If the transport cannot be established
        """
        pass

    @abstractmethod
    def test_connection(self) -> bool:
        """
        Test the connection to the export target.

        Returns:
            True if connection successful, False otherwise
        """
        pass

    @abstractmethod
    def create_span_exporter(self) -> "SpanExporter":
        """
        Create the exporter used by the span batch processor.

        Returns:
            SDK SpanExporter
        """
        pass

    @abstractmethod
    def create_log_exporter(self) -> "LogExporter":
        """
        Create the exporter used by the log batch processor.

        Returns:
            SDK LogExporter
        """
        pass

    @abstractmethod
    def create_metric_reader(self, export_interval_millis: int) -> "MetricReader":
        """
        Create the metric reader that collects and exports metrics.

        Args:
            export_interval_millis: Period between exports for push-based readers

        Returns:
            SDK MetricReader
        """
        pass

    @property
    def description(self) -> str:
        return self.__class__.__name__
