"""
Unit tests for telemetry models.
"""

import pytest
from pydantic import ValidationError

from otel_emitter.models import (
    InstrumentKind,
    InstrumentSpec,
    LogEntry,
    Outcome,
    ResourceAttributes,
    Severity,
    Span,
    SpanStatus,
    Trace,
)
from otel_emitter.config import SessionConfig
from opentelemetry._logs import SeverityNumber


def make_span(span_id, parent_span_id=None, start=0, end=1_000_000, status="ok", trace_id="a" * 32):
    return Span.model_validate({
        'span_id': span_id,
        'trace_id': trace_id,
        'parent_span_id': parent_span_id,
        'name': f'span-{span_id}',
        'start_time': '2024-01-01T00:00:00+00:00',
        'start_time_unix_nano': start,
        'end_time_unix_nano': end,
        'duration_ms': (end - start) / 1e6,
        'status': status,
    })


class TestOutcome:
    """Test cases for operation outcomes."""

    def test_ok_outcome(self):
        """Test creating an ok outcome."""
        outcome = Outcome.ok("done")

        assert outcome.status == SpanStatus.OK
        assert outcome.message == "done"
        assert not outcome.is_error

    def test_error_outcome(self):
        """Test creating an error outcome."""
        outcome = Outcome.error("database unavailable")

        assert outcome.status == SpanStatus.ERROR
        assert outcome.is_error

    def test_from_exception_uses_message(self):
        """Test building an outcome from an exception message."""
        outcome = Outcome.from_exception(RuntimeError("boom"))

        assert outcome.is_error
        assert outcome.message == "boom"

    def test_from_exception_without_message_uses_type_name(self):
        """Test falling back to the exception type name."""
        outcome = Outcome.from_exception(KeyError())

        assert outcome.message == "KeyError"

    def test_outcome_is_frozen(self):
        """Test that outcomes cannot be modified."""
        outcome = Outcome.ok()

        with pytest.raises(ValidationError):
            outcome.message = "changed"


class TestSeverity:
    """Test cases for log severities."""

    def test_severities_are_ordered(self):
        """Test severity ordering."""
        assert Severity.DEBUG < Severity.INFO < Severity.WARN < Severity.ERROR

    def test_maps_to_otel_severity_numbers(self):
        """Test mapping to OpenTelemetry severity numbers."""
        assert Severity.DEBUG.severity_number == SeverityNumber.DEBUG
        assert Severity.INFO.severity_number == SeverityNumber.INFO
        assert Severity.WARN.severity_number == SeverityNumber.WARN
        assert Severity.ERROR.severity_number == SeverityNumber.ERROR

    def test_from_severity_number_rounds_down(self):
        """Test mapping arbitrary severity numbers to the level below."""
        assert Severity.from_severity_number(SeverityNumber.INFO2) == Severity.INFO
        assert Severity.from_severity_number(SeverityNumber.FATAL) == Severity.ERROR
        assert Severity.from_severity_number(SeverityNumber.TRACE) == Severity.DEBUG
        assert Severity.from_severity_number(None) == Severity.INFO


class TestLogEntry:
    """Test cases for the log entry model."""

    def test_log_entry_is_immutable(self):
        """Test that log entries cannot be modified."""
        entry = LogEntry.model_validate({
            'timestamp': '2024-01-01T00:00:00+00:00',
            'timestamp_unix_nano': 1704067200000000000,
            'severity': Severity.WARN,
            'body': 'disk almost full',
            'attributes': {'component': 'storage'},
        })

        assert entry.span_id is None
        with pytest.raises(ValidationError):
            entry.body = 'changed'

    def test_missing_required_fields(self):
        """Test validation error with missing required fields."""
        with pytest.raises(ValidationError):
            LogEntry.model_validate({'body': 'no timestamp'})


class TestResourceAttributes:
    """Test cases for the resource descriptor."""

    def test_defaults_from_config(self):
        """Test deriving resource attributes from a session configuration."""
        config = SessionConfig(service_name="billing", service_version="2.0.0",
                               instance_id="pod-7", environment="staging")

        resource = ResourceAttributes.from_config(config)

        assert resource.as_dict() == {
            "service.name": "billing",
            "service.version": "2.0.0",
            "service.instance.id": "pod-7",
            "environment": "staging",
        }

    def test_extra_attributes_cannot_override_identity(self):
        """Test that extra attributes never replace the service identity."""
        resource = ResourceAttributes(service_name="billing", extra={"service.name": "other", "region": "eu"})

        attributes = resource.as_dict()

        assert attributes["service.name"] == "billing"
        assert attributes["region"] == "eu"

    def test_to_otel_resource(self):
        """Test converting to an OpenTelemetry resource."""
        resource = ResourceAttributes(service_name="billing").to_otel_resource()

        assert resource.attributes["service.name"] == "billing"
        assert resource.attributes["environment"] == "development"

    def test_resource_is_frozen(self):
        """Test that resource attributes cannot be modified."""
        resource = ResourceAttributes()

        with pytest.raises(ValidationError):
            resource.service_name = "changed"


class TestInstrumentSpec:
    """Test cases for instrument descriptors."""

    def test_equal_specs_compare_equal(self):
        """Test instrument spec equality."""
        first = InstrumentSpec(name="requests_total", kind=InstrumentKind.COUNTER, unit="1")
        second = InstrumentSpec(name="requests_total", kind="counter", unit="1")

        assert first == second

    def test_invalid_kind(self):
        """Test validation error with an unknown instrument kind."""
        with pytest.raises(ValidationError):
            InstrumentSpec(name="requests_total", kind="summary")


class TestTrace:
    """Test cases for trace summaries."""

    def test_from_spans_orders_and_counts(self):
        """Test building a trace summary from spans."""
        root = make_span("0000000000000001", start=0, end=10_000_000)
        child = make_span("0000000000000002", parent_span_id="0000000000000001",
                          start=2_000_000, end=6_000_000, status="error")

        trace = Trace.from_spans("a" * 32, [child, root])

        assert [span.span_id for span in trace.spans] == [root.span_id, child.span_id]
        assert trace.span_count == 2
        assert trace.error_count == 1
        assert trace.total_duration_ms == 10.0
        assert trace.root.span_id == root.span_id
        assert [span.span_id for span in trace.children_of(root.span_id)] == [child.span_id]

    def test_empty_trace(self):
        """Test a trace with no spans."""
        trace = Trace.from_spans("b" * 32, [])

        assert trace.span_count == 0
        assert trace.total_duration_ms == 0.0
        assert trace.root is None
