"""
Handle on a live span, enforcing the unstarted -> active -> ended lifecycle.
"""

from typing import Dict, Optional, Any, TYPE_CHECKING
import logging
import threading

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .errors import SpanStateError
from .models import Outcome, SpanState
from .utils import format_span_id, format_trace_id

if TYPE_CHECKING:
    from .session import TelemetrySession

logger = logging.getLogger(__name__)


class SpanHandle:
    """
    Wraps one SDK span for the duration of a traced operation.

    Created directly into the ACTIVE state by TelemetrySession.start_operation.
    Ending is allowed exactly once.
    """

    def __init__(self, span: trace.Span, name: str, owner: Optional["TelemetrySession"] = None):
        self._span = span
        self._name = name
        self._owner = owner
        self._state = SpanState.ACTIVE
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> SpanState:
        return self._state

    @property
    def is_ended(self) -> bool:
        return self._state == SpanState.ENDED

    @property
    def span(self) -> trace.Span:
        return self._span

    @property
    def span_id(self) -> str:
        return format_span_id(self._span.get_span_context().span_id)

    @property
    def trace_id(self) -> str:
        return format_trace_id(self._span.get_span_context().trace_id)

    def set_attribute(self, key: str, value: Any) -> None:
        self._require_active("set_attribute")
        self._span.set_attribute(key, value)

    def set_attributes(self, attributes: Dict[str, Any]) -> None:
        self._require_active("set_attributes")
        self._span.set_attributes(attributes)

    def record_exception(self, exc: BaseException) -> None:
        self._require_active("record_exception")
        self._span.record_exception(exc)

    def end(self, outcome: Optional[Outcome] = None) -> None:
        """
        Set the final status and end the span.

        Args:
            outcome: How the operation finished (defaults to ok)

        Raises:
            SpanStateError: If the span has already ended
            SessionClosedError: If the owning session is shut down
        """
        if self._owner is not None:
            self._owner.end_operation(self, outcome)
        else:
            self._finish(outcome)

    def _finish(self, outcome: Optional[Outcome] = None) -> None:
        outcome = outcome or Outcome.ok()
        with self._lock:
            if self._state != SpanState.ACTIVE:
                raise SpanStateError(f"Span '{self._name}' ({self.span_id}) is already {self._state.value}")
            self._state = SpanState.ENDED

        if outcome.is_error:
            self._span.set_status(Status(StatusCode.ERROR, outcome.message))
        else:
            # The SDK drops descriptions on OK statuses.
            self._span.set_status(Status(StatusCode.OK))
            if outcome.message:
                self._span.set_attribute("status.message", outcome.message)
        self._span.end()
        logger.debug(f"Ended span '{self._name}' ({self.span_id}) with status {outcome.status.value}")

    def _require_active(self, action: str) -> None:
        if self._state != SpanState.ACTIVE:
            raise SpanStateError(f"Cannot {action} on span '{self._name}': span is {self._state.value}")

    def __repr__(self) -> str:
        return f"SpanHandle(name={self._name!r}, span_id={self.span_id}, state={self._state.value})"
