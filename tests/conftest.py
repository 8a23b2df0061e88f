"""
Shared fixtures for otel_emitter tests.
"""

import socket

import pytest

from otel_emitter import (
    ExportDrainError,
    InMemoryTransport,
    SessionConfig,
    TelemetrySession,
    TraceInspector,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: tests that open network connections")
    config.addinivalue_line("markers", "collector: tests that need a running OpenTelemetry collector")


@pytest.fixture
def session_config():
    """Session configuration with short timeouts."""
    return SessionConfig(
        service_name="test-service",
        service_version="9.9.9",
        instance_id="test-instance",
        environment="test",
        connect_timeout_seconds=1.0,
        shutdown_timeout_seconds=5.0,
    )


@pytest.fixture
def transport():
    """In-memory transport capturing everything the session exports."""
    return InMemoryTransport()


@pytest.fixture
def session(session_config, transport):
    """Telemetry session exporting to the in-memory transport."""
    telemetry = TelemetrySession.initialize(session_config, transport=transport)
    yield telemetry
    try:
        telemetry.shutdown()
    except ExportDrainError:
        pass


@pytest.fixture
def inspector(transport):
    """Trace inspector over the in-memory transport."""
    return TraceInspector(transport)


@pytest.fixture
def unused_endpoint():
    """host:port of a local port nothing listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"127.0.0.1:{port}"
