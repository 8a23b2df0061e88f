"""
Demonstration workload: a request that queries a database and calls an external API,
emitting correlated spans, logs and metrics along the way.
"""

from dataclasses import dataclass
from typing import Callable, Optional
import logging
import random
import time

from .context import ExecutionContext
from .instruments import MetricInstrument
from .models import Outcome, Severity
from .session import TelemetrySession

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


@dataclass
class DemoInstruments:
    """Instruments used by the demo workload."""
    request_counter: MetricInstrument
    request_duration: MetricInstrument
    active_connections: MetricInstrument
    memory_usage: MetricInstrument


def build_instruments(session: TelemetrySession, rng: Optional[random.Random] = None) -> DemoInstruments:
    """
    Create the demo's counter, histogram, up/down counter and memory gauge.

    Args:
        session: Session owning the meter
        rng: Random source for the simulated memory readings

    Returns:
        DemoInstruments
    """
    rng = rng or random.Random()

    def read_memory_usage():
        # Simulated heap usage between 50 and 100 MiB
        return [(MIB * (50 + rng.randrange(50)), {"memory_type": "heap"})]

    return DemoInstruments(
        request_counter=session.create_counter(
            "requests_total", description="Total number of requests", unit="1"
        ),
        request_duration=session.create_histogram(
            "request_duration_seconds", description="Duration of requests", unit="s"
        ),
        active_connections=session.create_up_down_counter(
            "active_connections", description="Number of active connections", unit="1"
        ),
        memory_usage=session.create_observable_gauge(
            "memory_usage_bytes", read_memory_usage, description="Current memory usage", unit="By"
        ),
    )


def simulate_work(
    session: TelemetrySession,
    context: ExecutionContext,
    instruments: DemoInstruments,
    sleep: Callable[[float], None] = time.sleep,
    rng: Optional[random.Random] = None,
) -> None:
    """Run the database query and the nested external API call under context."""
    rng = rng or random.Random()
    request_attributes = {"method": "GET", "endpoint": "/api/users"}
    db_connection = {"connection_type": "database"}
    http_connection = {"connection_type": "http_client"}

    session.record_metric(instruments.active_connections, 1, db_connection)
    try:
        request_start = time.monotonic()
        session.record_metric(instruments.request_counter, 1, {**request_attributes, "status": "processing"})

        with session.operation("database-query", context, {
            "db.system": "postgresql",
            "db.name": "userdb",
            "db.operation": "SELECT",
        }) as (db_context, db_span):
            session.emit_log(db_context, "Executing database query", Severity.DEBUG, {
                "component": "database",
                "query": "SELECT * FROM users WHERE id = ?",
            })

            db_duration = rng.randint(80, 119) / 1000
            sleep(db_duration)

            session.record_metric(instruments.request_duration, db_duration, {
                "operation": "database_query",
                "db.system": "postgresql",
            })
            db_span.set_attributes({
                "db.rows_affected": 1,
                "db.query_time": f"{db_duration * 1000:.0f}ms",
            })

            session.record_metric(instruments.active_connections, 1, http_connection)
            try:
                with session.operation("external-api-call", db_context, {
                    "http.method": "GET",
                    "http.url": "https://api.example.com/data",
                }) as (api_context, api_span):
                    session.emit_log(api_context, "Making external API call", Severity.INFO, {
                        "component": "api-client",
                        "url": "https://api.example.com/data",
                        "method": "GET",
                    })

                    api_duration = rng.randint(150, 249) / 1000
                    sleep(api_duration)

                    session.record_metric(instruments.request_duration, api_duration, {
                        "operation": "api_call",
                        "http.method": "GET",
                        "http.status_code": 200,
                    })
                    response_time = f"{api_duration * 1000:.0f}ms"
                    api_span.set_attributes({
                        "http.status_code": 200,
                        "http.response_time": response_time,
                    })
                    session.emit_log(api_context, "API call completed successfully", Severity.INFO, {
                        "component": "api-client",
                        "status_code": 200,
                        "response_time": response_time,
                    })

                    total_duration = time.monotonic() - request_start
                    session.record_metric(instruments.request_duration, total_duration, {
                        "operation": "total_request",
                        **request_attributes,
                        "status": "success",
                    })
                    session.record_metric(instruments.request_counter, 1, {**request_attributes, "status": "success"})
            finally:
                session.record_metric(instruments.active_connections, -1, http_connection)
    finally:
        session.record_metric(instruments.active_connections, -1, db_connection)


def run_demo(
    session: TelemetrySession,
    instruments: DemoInstruments,
    sleep: Callable[[float], None] = time.sleep,
    rng: Optional[random.Random] = None,
) -> Outcome:
    """
    Run the full demo under a root "main-operation" span.

    Args:
        session: Session to emit through
        instruments: Instruments from build_instruments()
        sleep: Sleep function used to simulate work
        rng: Random source for simulated durations

    Returns:
        Outcome of the root operation
    """
    root_attributes = {"operation.type": "demo", "user.id": "12345"}
    with session.operation("main-operation", ExecutionContext.empty(), root_attributes) as (context, root_span):
        session.emit_log(context, "Starting main operation", Severity.INFO, {
            "component": "main",
            "operation": "start",
        })

        try:
            simulate_work(session, context, instruments, sleep=sleep, rng=rng)
        except Exception as e:
            logger.error(f"Demo work failed: {e}")
            outcome = Outcome.error(str(e))
            session.emit_log(context, f"Operation failed: {e}", Severity.ERROR, {
                "component": "main",
                "error": str(e),
            })
        else:
            outcome = Outcome.ok("Operation completed successfully")
            session.emit_log(context, "Operation completed successfully", Severity.INFO, {
                "component": "main",
                "operation": "complete",
            })

        root_span.end(outcome)
    return outcome
