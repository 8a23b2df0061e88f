"""
Metric instrument wrappers.
"""

from typing import Callable, Dict, Iterable, Optional, Any, Tuple, Union, TYPE_CHECKING
import logging

from opentelemetry.metrics import CallbackOptions, Observation

from .errors import InvalidMeasurementError
from .models import InstrumentKind, InstrumentSpec

if TYPE_CHECKING:
    from .session import TelemetrySession

logger = logging.getLogger(__name__)

Number = Union[int, float]
Attributes = Dict[str, Any]
GaugeReading = Union[Observation, Tuple[Number, Optional[Attributes]]]
GaugeCallback = Callable[[], Iterable[GaugeReading]]


def gauge_callback_adapter(callback: GaugeCallback) -> Callable[[CallbackOptions], Iterable[Observation]]:
    """
    Adapt a plain callback into an SDK observable callback.

    The callback returns (value, attributes) pairs or Observation objects. It is
    only invoked when the metric reader collects, once per export interval.
    """
    def observe(options: CallbackOptions) -> Iterable[Observation]:
        observations = []
        for reading in callback():
            if isinstance(reading, Observation):
                observations.append(reading)
            else:
                value, attributes = reading
                observations.append(Observation(value, attributes or {}))
        return observations

    return observe


class MetricInstrument:
    """An instrument created by a TelemetrySession, with its fixed descriptor."""

    def __init__(self, spec: InstrumentSpec, instrument: Any, owner: Optional["TelemetrySession"] = None):
        self.spec = spec
        self._instrument = instrument
        self._owner = owner

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def kind(self) -> InstrumentKind:
        return self.spec.kind

    def record(self, value: Number, attributes: Optional[Attributes] = None) -> None:
        """Record one measurement; same as TelemetrySession.record_metric(self, ...)."""
        if self._owner is not None:
            self._owner.record_metric(self, value, attributes)
        else:
            self._apply(value, attributes)

    def _apply(self, value: Number, attributes: Optional[Attributes] = None) -> None:
        attributes = attributes or {}
        kind = self.spec.kind

        if kind == InstrumentKind.OBSERVABLE_GAUGE:
            raise InvalidMeasurementError(
                f"Observable gauge '{self.name}' is read through its callback; it cannot be recorded directly"
            )
        if kind == InstrumentKind.COUNTER:
            if value < 0:
                raise InvalidMeasurementError(f"Counter '{self.name}' is monotonic; got negative value {value}")
            self._instrument.add(value, attributes)
        elif kind == InstrumentKind.UP_DOWN_COUNTER:
            self._instrument.add(value, attributes)
        elif kind == InstrumentKind.HISTOGRAM:
            if value < 0:
                raise InvalidMeasurementError(f"Histogram '{self.name}' only accepts non-negative values; got {value}")
            self._instrument.record(value, attributes)

    def __repr__(self) -> str:
        return f"MetricInstrument(name={self.name!r}, kind={self.kind.value}, unit={self.spec.unit!r})"
