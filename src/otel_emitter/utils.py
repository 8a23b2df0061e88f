"""
Utility functions for converting SDK telemetry into plain values.
"""

from typing import Optional, Union
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def ns_to_datetime(timestamp_ns: Union[int, datetime, None]) -> Optional[datetime]:
    """
    Convert a unix timestamp in nanoseconds to a timezone-aware datetime.

    Args:
        timestamp_ns: Nanoseconds since the epoch, or a datetime

    Returns:
        UTC datetime, or None if no timestamp was given
    """
    if timestamp_ns is None:
        return None
    if isinstance(timestamp_ns, datetime):
        return timestamp_ns
    return datetime.fromtimestamp(timestamp_ns / 1e9, tz=timezone.utc)


def calculate_duration_ms(start_ns: int, end_ns: Optional[int]) -> float:
    """
    Calculate span duration from start and end timestamps.

    Args:
        start_ns: Start time in unix nanoseconds
        end_ns: End time in unix nanoseconds

    Returns:
        Duration in milliseconds (0.0 while the span has not ended)
    """
    if end_ns is None:
        return 0.0
    return (end_ns - start_ns) / 1e6


def format_trace_id(trace_id: int) -> str:
    return format(trace_id, "032x")


def format_span_id(span_id: int) -> str:
    return format(span_id, "016x")


def strip_scheme(endpoint: str) -> str:
    """Return host:port from an endpoint that may carry an http(s):// scheme and a path."""
    target = endpoint
    for scheme in ("http://", "https://", "grpc://"):
        if target.startswith(scheme):
            target = target[len(scheme):]
            break
    return target.split("/", 1)[0]
