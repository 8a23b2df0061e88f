"""
Command line entry point for the demo workload.
"""

from typing import List, Optional
import argparse
import json
import logging

from dotenv import load_dotenv

from .config import SessionConfig
from .demo import build_instruments, run_demo
from .errors import ExportDrainError, InitializationError
from .session import TelemetrySession
from .trace_inspector import TraceInspector
from .transports import InMemoryTransport

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    # Suppress verbose exporter logging
    logging.getLogger("grpc").setLevel(logging.WARNING)
    logging.getLogger("opentelemetry").setLevel(logging.WARNING)


def summarize(transport: InMemoryTransport) -> dict:
    """Summarize everything captured by an in-memory transport."""
    inspector = TraceInspector(transport)
    return {
        "traces": [
            trace.model_dump(mode="json")
            for trace in inspector.traces().values()
        ],
        "logs": [entry.model_dump(mode="json") for entry in transport.finished_logs()],
        "metrics": [point.model_dump(mode="json") for point in transport.metric_points()],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Emit correlated demo traces, logs and metrics to an OpenTelemetry collector."
    )
    parser.add_argument("--endpoint", default=None,
                        help="Collector endpoint (default: $OTEL_EXPORTER_OTLP_ENDPOINT or localhost:4317)")
    parser.add_argument("--connect-timeout", type=float, default=None,
                        help="Seconds to wait for the collector connection (default: 5)")
    parser.add_argument("--shutdown-timeout", type=float, default=None,
                        help="Seconds to wait for buffered telemetry to drain (default: 10)")
    parser.add_argument("--export-interval", type=int, default=None,
                        help="Metric export interval in milliseconds (default: 10000)")
    parser.add_argument("--in-memory", action="store_true",
                        help="Capture telemetry in memory and print it instead of exporting")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)

    config = SessionConfig.from_env(
        endpoint=args.endpoint,
        connect_timeout_seconds=args.connect_timeout,
        shutdown_timeout_seconds=args.shutdown_timeout,
        export_interval_millis=args.export_interval,
    )
    transport = InMemoryTransport() if args.in_memory else None

    try:
        session = TelemetrySession.initialize(config, transport=transport)
    except InitializationError as e:
        logger.error(f"Failed to set up telemetry: {e}")
        return 1

    print("Starting OpenTelemetry demo...")
    try:
        instruments = build_instruments(session)
        outcome = run_demo(session, instruments)
        logger.info(f"Demo finished with status {outcome.status.value}")

        if transport is not None:
            session.force_flush()
            print(json.dumps(summarize(transport), indent=2, default=str))
    finally:
        try:
            session.shutdown()
        except ExportDrainError as e:
            logger.warning(f"Error shutting down telemetry: {e}")

    print("Demo completed. Check your OpenTelemetry collector for traces, logs, and metrics!")
    return 0
