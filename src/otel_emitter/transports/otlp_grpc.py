"""
OTLP/gRPC transport for exporting to an OpenTelemetry collector.
"""

from dataclasses import dataclass
from typing import Optional
import logging

import grpc
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader

from .interfaces import ExportTransport
from ..config import DEFAULT_ENDPOINT, SessionConfig
from ..errors import InitializationError
from ..utils import strip_scheme

logger = logging.getLogger(__name__)


@dataclass
class OtlpGrpcConfig:
    """Configuration for the OTLP/gRPC connection."""
    endpoint: str = DEFAULT_ENDPOINT
    insecure: Optional[bool] = None
    timeout_seconds: float = 10.0
    connect_timeout_seconds: float = 5.0

    @classmethod
    def from_session_config(cls, config: SessionConfig) -> "OtlpGrpcConfig":
        return cls(
            endpoint=config.resolved_endpoint(),
            timeout_seconds=config.export_timeout_seconds,
            connect_timeout_seconds=config.connect_timeout_seconds,
        )


class OtlpGrpcTransport(ExportTransport):
    """
    Exports spans, logs and metrics to a collector over OTLP/gRPC.

    Each producer's exporter holds its own long-lived channel to the endpoint.
    """

    def __init__(self, config: OtlpGrpcConfig):
        """
        Initialize the OTLP/gRPC transport.

        Args:
            config: Configuration object for the connection
        """
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.target = strip_scheme(config.endpoint)
        if config.insecure is None:
            self.insecure = not config.endpoint.startswith("https://")
        else:
            self.insecure = config.insecure

    @property
    def description(self) -> str:
        return f"otlp+grpc://{self.target}"

    def _open_channel(self) -> grpc.Channel:
        if self.insecure:
            return grpc.insecure_channel(self.target)
        return grpc.secure_channel(self.target, grpc.ssl_channel_credentials())

    def _wait_until_ready(self, timeout_seconds: float) -> None:
        channel = self._open_channel()
        ready = grpc.channel_ready_future(channel)
        try:
            ready.result(timeout=timeout_seconds)
        finally:
            ready.cancel()
            channel.close()

    def connect(self) -> None:
        self.logger.debug(f"Connecting to {self.target} (timeout {self.config.connect_timeout_seconds}s)")
        try:
            self._wait_until_ready(self.config.connect_timeout_seconds)
        except grpc.FutureTimeoutError as e:
            raise InitializationError(
                f"Failed to connect to collector at {self.target} within "
                f"{self.config.connect_timeout_seconds}s",
                endpoint=self.config.endpoint,
            ) from e
        self.logger.info(f"Connected to collector at {self.target}")

    def test_connection(self) -> bool:
        try:
            self._wait_until_ready(self.config.connect_timeout_seconds)
            self.logger.info(f"Connection to {self.target} successful")
            return True
        except grpc.FutureTimeoutError as e:
            self.logger.error(f"Connection test failed: {e!r}")
            return False

    def create_span_exporter(self) -> OTLPSpanExporter:
        return OTLPSpanExporter(
            endpoint=self.config.endpoint,
            insecure=self.insecure,
            timeout=self.config.timeout_seconds,
        )

    def create_log_exporter(self) -> OTLPLogExporter:
        return OTLPLogExporter(
            endpoint=self.config.endpoint,
            insecure=self.insecure,
            timeout=self.config.timeout_seconds,
        )

    def create_metric_reader(self, export_interval_millis: int) -> PeriodicExportingMetricReader:
        exporter = OTLPMetricExporter(
            endpoint=self.config.endpoint,
            insecure=self.insecure,
            timeout=self.config.timeout_seconds,
        )
        return PeriodicExportingMetricReader(
            exporter,
            export_interval_millis=export_interval_millis,
            export_timeout_millis=self.config.timeout_seconds * 1000,
        )
