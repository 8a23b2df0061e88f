"""
Session configuration and export endpoint resolution.
"""

from dataclasses import dataclass
from typing import Mapping, Optional
import logging
import os

logger = logging.getLogger(__name__)

ENDPOINT_ENV_VAR = "OTEL_EXPORTER_OTLP_ENDPOINT"
DEFAULT_ENDPOINT = "localhost:4317"

DEFAULT_SERVICE_NAME = "otel-demo-service"
DEFAULT_SERVICE_VERSION = "1.0.0"
DEFAULT_INSTANCE_ID = "instance-1"
DEFAULT_ENVIRONMENT = "development"


def resolve_endpoint(explicit: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Resolve the export endpoint.

    Precedence: explicit value, then the OTEL_EXPORTER_OTLP_ENDPOINT environment
    variable, then the compiled-in default.

    Args:
        explicit: Endpoint passed by the caller, if any
        environ: Environment mapping to read from (defaults to os.environ)

    Returns:
        The endpoint to export to
    """
    if explicit:
        return explicit

    environ = os.environ if environ is None else environ
    from_env = environ.get(ENDPOINT_ENV_VAR, "").strip()
    if from_env:
        logger.debug(f"Using endpoint from {ENDPOINT_ENV_VAR}: {from_env}")
        return from_env

    return DEFAULT_ENDPOINT


@dataclass
class SessionConfig:
    """Configuration for a telemetry emission session."""
    service_name: str = DEFAULT_SERVICE_NAME
    service_version: str = DEFAULT_SERVICE_VERSION
    instance_id: str = DEFAULT_INSTANCE_ID
    environment: str = DEFAULT_ENVIRONMENT
    endpoint: Optional[str] = None
    connect_timeout_seconds: float = 5.0
    export_timeout_seconds: float = 10.0
    export_interval_millis: int = 10_000
    max_queue_size: int = 2048
    max_export_batch_size: int = 512
    schedule_delay_millis: int = 5000
    shutdown_timeout_seconds: float = 10.0

    def resolved_endpoint(self, environ: Optional[Mapping[str, str]] = None) -> str:
        return resolve_endpoint(self.endpoint, environ)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "SessionConfig":
        """
        Build a config from environment variables.

        Reads OTEL_EXPORTER_OTLP_ENDPOINT, OTEL_SERVICE_NAME, SERVICE_VERSION,
        SERVICE_INSTANCE_ID and ENVIRONMENT. Keyword overrides win over the
        environment; None overrides are ignored.
        """
        environ = os.environ if environ is None else environ
        values = {
            "endpoint": environ.get(ENDPOINT_ENV_VAR) or None,
            "service_name": environ.get("OTEL_SERVICE_NAME", DEFAULT_SERVICE_NAME),
            "service_version": environ.get("SERVICE_VERSION", DEFAULT_SERVICE_VERSION),
            "instance_id": environ.get("SERVICE_INSTANCE_ID", DEFAULT_INSTANCE_ID),
            "environment": environ.get("ENVIRONMENT", DEFAULT_ENVIRONMENT),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
