"""
Telemetry emission session: owns the span, log and metric producers for one process run.
"""

from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Any, Tuple
import logging
import threading
import time

from opentelemetry._logs import LogRecord
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from .config import SessionConfig
from .context import ExecutionContext
from .errors import ExportDrainError, InitializationError, SessionClosedError
from .instruments import GaugeCallback, MetricInstrument, Number, gauge_callback_adapter
from .models import (
    InstrumentKind,
    InstrumentSpec,
    LogEntry,
    Outcome,
    ResourceAttributes,
    Severity,
)
from .operation import SpanHandle
from .transports import ExportTransport, OtlpGrpcConfig, OtlpGrpcTransport
from .utils import ns_to_datetime

logger = logging.getLogger(__name__)

DrainStep = Callable[[float], Optional[bool]]


class TelemetrySession:
    """
    Owns one resource descriptor and the three producers (spans, logs, metrics).

    Nothing is registered globally: code that emits telemetry receives the
    session and passes ExecutionContext objects explicitly.
    """

    def __init__(
        self,
        config: SessionConfig,
        resource: ResourceAttributes,
        transport: ExportTransport,
        tracer_provider: TracerProvider,
        logger_provider: LoggerProvider,
        meter_provider: MeterProvider,
    ):
        """
        Wire a session around already constructed providers. Use initialize() instead.

        Args:
            config: Session configuration
            resource: Resource attributes shared by all producers
            transport: Transport the exporters were created from
            tracer_provider: SDK tracer provider
            logger_provider: SDK logger provider
            meter_provider: SDK meter provider
        """
        self.config = config
        self.resource = resource
        self.transport = transport
        self.logger = logging.getLogger(self.__class__.__name__)

        self._tracer_provider = tracer_provider
        self._logger_provider = logger_provider
        self._meter_provider = meter_provider

        self._tracer = tracer_provider.get_tracer(resource.service_name, resource.service_version)
        self._otel_logger = logger_provider.get_logger(resource.service_name, resource.service_version)
        self._meter = meter_provider.get_meter(resource.service_name, resource.service_version)

        self._instruments: Dict[str, MetricInstrument] = {}
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def initialize(
        cls,
        config: Optional[SessionConfig] = None,
        resource: Optional[ResourceAttributes] = None,
        transport: Optional[ExportTransport] = None,
    ) -> "TelemetrySession":
        """
        Connect the transport and build the three producers.

        Args:
            config: Session configuration (defaults to SessionConfig())
            resource: Resource attributes (defaults to those derived from config)
            transport: Export transport (defaults to OTLP/gRPC against the resolved endpoint)

        Returns:
            A ready TelemetrySession

        Raises:
            InitializationError: If the transport cannot be established
        """
        config = config or SessionConfig()
        resource = resource or ResourceAttributes.from_config(config)
        if transport is None:
            transport = OtlpGrpcTransport(OtlpGrpcConfig.from_session_config(config))

        logger.info(f"Initializing telemetry for {resource.service_name} -> {transport.description}")
        transport.connect()

        otel_resource = resource.to_otel_resource()
        export_timeout_millis = config.export_timeout_seconds * 1000
        try:
            tracer_provider = TracerProvider(resource=otel_resource, sampler=ALWAYS_ON)
            tracer_provider.add_span_processor(BatchSpanProcessor(
                transport.create_span_exporter(),
                max_queue_size=config.max_queue_size,
                schedule_delay_millis=config.schedule_delay_millis,
                max_export_batch_size=config.max_export_batch_size,
                export_timeout_millis=export_timeout_millis,
            ))

            logger_provider = LoggerProvider(resource=otel_resource)
            logger_provider.add_log_record_processor(BatchLogRecordProcessor(
                transport.create_log_exporter(),
                max_queue_size=config.max_queue_size,
                schedule_delay_millis=config.schedule_delay_millis,
                max_export_batch_size=config.max_export_batch_size,
                export_timeout_millis=export_timeout_millis,
            ))

            meter_provider = MeterProvider(
                resource=otel_resource,
                metric_readers=[transport.create_metric_reader(config.export_interval_millis)],
            )
        except Exception as e:
            raise InitializationError(
                f"Failed to create exporters for {transport.description}: {e}",
                endpoint=config.resolved_endpoint(),
            ) from e

        return cls(config, resource, transport, tracer_provider, logger_provider, meter_provider)

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------ traces

    def start_operation(
        self,
        name: str,
        context: Optional[ExecutionContext] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> Tuple[ExecutionContext, SpanHandle]:
        """
        Begin a span parented to the span active in context.

        Args:
            name: Operation name
            context: Parent context; None or an empty context starts a root span
            attributes: Initial span attributes

        Returns:
            (context carrying the new span, handle for ending it)
        """
        self._ensure_open("start_operation")
        parent = context if context is not None else ExecutionContext.empty()
        span = self._tracer.start_span(name, context=parent.otel_context, attributes=attributes)
        handle = SpanHandle(span, name, owner=self)
        self.logger.debug(f"Started span '{name}' ({handle.span_id}) under {parent.span_id or 'root'}")
        return parent.with_span(span), handle

    def end_operation(self, handle: SpanHandle, outcome: Optional[Outcome] = None) -> None:
        """
        End a span with the given outcome (ok when omitted).

        Raises:
            SpanStateError: If the span has already ended
            SessionClosedError: If the session is shut down
        """
        self._ensure_open("end_operation")
        handle._finish(outcome)

    @contextmanager
    def operation(
        self,
        name: str,
        context: Optional[ExecutionContext] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> Iterator[Tuple[ExecutionContext, SpanHandle]]:
        """
        Scoped span: ended with ok on normal exit, with an error outcome if the block raises.

        The block may end the span itself with a custom outcome.
        """
        child_context, handle = self.start_operation(name, context, attributes)
        try:
            yield child_context, handle
        except Exception as exc:
            if not handle.is_ended:
                handle.record_exception(exc)
                handle.end(Outcome.from_exception(exc))
            raise
        else:
            if not handle.is_ended:
                handle.end()

    # -------------------------------------------------------------------- logs

    def emit_log(
        self,
        context: Optional[ExecutionContext],
        message: str,
        severity: Severity = Severity.INFO,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> LogEntry:
        """
        Hand a log record correlated to the context's active span to the batch processor.

        Args:
            context: Context whose active span the record is correlated to
            message: Log body
            severity: Severity level
            attributes: Log attributes

        Returns:
            The emitted LogEntry
        """
        self._ensure_open("emit_log")
        context = context if context is not None else ExecutionContext.empty()
        attributes = dict(attributes or {})
        timestamp = time.time_ns()

        self._otel_logger.emit(LogRecord(
            timestamp=timestamp,
            observed_timestamp=timestamp,
            context=context.otel_context,
            severity_text=severity.name,
            severity_number=severity.severity_number,
            body=message,
            attributes=attributes,
        ))

        return LogEntry(
            timestamp=ns_to_datetime(timestamp),
            timestamp_unix_nano=timestamp,
            severity=severity,
            body=message,
            attributes=attributes,
            trace_id=context.trace_id,
            span_id=context.span_id,
        )

    # ----------------------------------------------------------------- metrics

    def create_counter(self, name: str, description: str = "", unit: str = "") -> MetricInstrument:
        spec = InstrumentSpec(name=name, kind=InstrumentKind.COUNTER, description=description, unit=unit)
        return self._register(spec, lambda: self._meter.create_counter(name, unit=unit, description=description))

    def create_up_down_counter(self, name: str, description: str = "", unit: str = "") -> MetricInstrument:
        spec = InstrumentSpec(name=name, kind=InstrumentKind.UP_DOWN_COUNTER, description=description, unit=unit)
        return self._register(spec, lambda: self._meter.create_up_down_counter(name, unit=unit, description=description))

    def create_histogram(self, name: str, description: str = "", unit: str = "") -> MetricInstrument:
        spec = InstrumentSpec(name=name, kind=InstrumentKind.HISTOGRAM, description=description, unit=unit)
        return self._register(spec, lambda: self._meter.create_histogram(name, unit=unit, description=description))

    def create_observable_gauge(
        self,
        name: str,
        callback: GaugeCallback,
        description: str = "",
        unit: str = "",
    ) -> MetricInstrument:
        """
        Register a pull-based gauge.

        The callback is invoked by the metric reader at each collection, never by
        application code. It returns (value, attributes) pairs.
        """
        spec = InstrumentSpec(name=name, kind=InstrumentKind.OBSERVABLE_GAUGE, description=description, unit=unit)
        return self._register(spec, lambda: self._meter.create_observable_gauge(
            name,
            callbacks=[gauge_callback_adapter(callback)],
            unit=unit,
            description=description,
        ))

    def record_metric(
        self,
        instrument: MetricInstrument,
        value: Number,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Add one measurement to an instrument's aggregation state.

        Raises:
            InvalidMeasurementError: For negative counter/histogram values or observable gauges
        """
        self._ensure_open("record_metric")
        instrument._apply(value, attributes)

    def _register(self, spec: InstrumentSpec, factory) -> MetricInstrument:
        self._ensure_open(f"create instrument '{spec.name}'")
        with self._lock:
            existing = self._instruments.get(spec.name)
            if existing is not None:
                if existing.spec != spec:
                    raise ValueError(
                        f"Instrument '{spec.name}' already registered as {existing.kind.value} "
                        f"with unit '{existing.spec.unit}'"
                    )
                return existing
            instrument = MetricInstrument(spec, factory(), owner=self)
            self._instruments[spec.name] = instrument
        self.logger.debug(f"Created {spec.kind.value} '{spec.name}' ({spec.unit or 'no unit'})")
        return instrument

    # ---------------------------------------------------------------- lifecycle

    def force_flush(self, timeout: Optional[float] = None) -> bool:
        """
        Export everything buffered without closing the session.

        Args:
            timeout: Seconds to wait overall (defaults to config.shutdown_timeout_seconds)

        Returns:
            True if every producer drained in time
        """
        timeout = self.config.shutdown_timeout_seconds if timeout is None else timeout
        failed = self._drain([
            (producer, provider.force_flush) for producer, provider in self._producers()
        ], timeout)
        if failed:
            self.logger.warning(f"Flushing {', '.join(failed)} did not complete within {timeout}s")
        return not failed

    def shutdown(self, timeout: Optional[float] = None) -> bool:
        """
        Flush spans and logs, stop the periodic metric reader after one final export.

        The three producers drain concurrently, each bounded by the same deadline,
        so a stalled exporter only fails its own producer. A second call is a
        no-op returning True.

        Args:
            timeout: Seconds to wait overall (defaults to config.shutdown_timeout_seconds)

        Returns:
            True when all producers drained

        Raises:
            ExportDrainError: If any producer failed to drain in time. The session is closed anyway.
        """
        with self._lock:
            if self._closed:
                self.logger.debug("Telemetry session already shut down")
                return True
            self._closed = True

        timeout = self.config.shutdown_timeout_seconds if timeout is None else timeout
        failed = self._drain([
            ("traces", lambda millis: self._flush_and_close(self._tracer_provider, millis)),
            ("logs", lambda millis: self._flush_and_close(self._logger_provider, millis)),
            ("metrics", lambda millis: self._meter_provider.shutdown(timeout_millis=millis)),
        ], timeout)

        if failed:
            raise ExportDrainError(failed, timeout)

        self.logger.info(f"Telemetry session for {self.resource.service_name} shut down")
        return True

    @staticmethod
    def _flush_and_close(provider, timeout_millis: float) -> bool:
        drained = provider.force_flush(timeout_millis)
        provider.shutdown()
        return drained

    def _drain(self, steps: List[Tuple[str, DrainStep]], timeout: float) -> List[str]:
        """
        Run one drain step per producer on its own thread and wait for all of them.

        The SDK batch processors do not bound force_flush by its timeout, so the
        deadline is enforced here by joining each thread for the time left.
        Threads still running at the deadline are daemons and are abandoned.

        Args:
            steps: (producer name, callable taking a timeout in milliseconds)
            timeout: Seconds to wait for all steps together

        Returns:
            Names of producers that raised, reported False, or missed the deadline
        """
        deadline = time.monotonic() + timeout
        results: Dict[str, bool] = {}
        threads = []
        for producer, step in steps:
            thread = threading.Thread(
                target=self._run_drain_step,
                args=(producer, step, timeout * 1000, results),
                name=f"otel-emitter-drain-{producer}",
                daemon=True,
            )
            thread.start()
            threads.append((producer, thread))

        failed: List[str] = []
        for producer, thread in threads:
            thread.join(max(deadline - time.monotonic(), 0.0))
            if thread.is_alive():
                self.logger.error(f"Timed out draining {producer} after {timeout}s")
                failed.append(producer)
            elif not results.get(producer, False):
                failed.append(producer)
        return failed

    def _run_drain_step(self, producer: str, step: DrainStep, timeout_millis: float, results: Dict[str, bool]) -> None:
        try:
            results[producer] = step(timeout_millis) is not False
        except Exception as e:
            self.logger.error(f"Error draining {producer}: {e}")
            results[producer] = False

    def _producers(self) -> List[Tuple[str, Any]]:
        return [
            ("traces", self._tracer_provider),
            ("logs", self._logger_provider),
            ("metrics", self._meter_provider),
        ]

    def _ensure_open(self, action: str) -> None:
        if self._closed:
            raise SessionClosedError(f"Cannot {action}: telemetry session is shut down")

    def __enter__(self) -> "TelemetrySession":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        try:
            self.shutdown()
        except ExportDrainError as e:
            self.logger.warning(f"Telemetry not fully exported: {e}")
        return False
