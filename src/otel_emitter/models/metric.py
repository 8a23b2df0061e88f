"""
Metric instrument descriptors and collected data points.
"""

from typing import Dict, List, Optional, Any, Union
from enum import Enum
from pydantic import BaseModel, Field

from opentelemetry.sdk.metrics.export import Gauge, Histogram, Sum


class InstrumentKind(str, Enum):
    COUNTER = "counter"
    UP_DOWN_COUNTER = "up_down_counter"
    HISTOGRAM = "histogram"
    OBSERVABLE_GAUGE = "observable_gauge"


class InstrumentSpec(BaseModel):
    """Name, description and unit of an instrument. Fixed at creation."""
    name: str = Field(..., description="Instrument name")
    kind: InstrumentKind = Field(..., description="Instrument kind")
    description: str = Field("", description="Human readable description")
    unit: str = Field("", description="Unit of measure (UCUM)")

    class Config:
        """Pydantic configuration."""
        frozen = True


class MetricPoint(BaseModel):
    """One aggregated data point for one attribute set of an instrument."""
    name: str = Field(..., description="Instrument name")
    kind: InstrumentKind = Field(..., description="Instrument kind")
    unit: str = Field("", description="Unit of measure")
    attributes: Dict[str, Any] = Field(default_factory=dict, description="Data point attributes")
    value: Union[int, float] = Field(..., description="Running total, last value, or histogram sum")
    count: Optional[int] = Field(None, description="Histogram sample count")
    min: Optional[float] = Field(None, description="Histogram minimum")
    max: Optional[float] = Field(None, description="Histogram maximum")
    bucket_counts: Optional[List[int]] = Field(None, description="Histogram bucket counts")
    explicit_bounds: Optional[List[float]] = Field(None, description="Histogram bucket boundaries")
    time_unix_nano: int = Field(0, description="Collection time in unix nanoseconds")

    class Config:
        """Pydantic configuration."""
        frozen = True


def _kind_of(data) -> InstrumentKind:
    if isinstance(data, Histogram):
        return InstrumentKind.HISTOGRAM
    if isinstance(data, Sum):
        return InstrumentKind.COUNTER if data.is_monotonic else InstrumentKind.UP_DOWN_COUNTER
    if isinstance(data, Gauge):
        return InstrumentKind.OBSERVABLE_GAUGE
    raise TypeError(f"Unsupported metric data type: {type(data).__name__}")


def points_from_metrics_data(metrics_data, name: Optional[str] = None) -> List[MetricPoint]:
    """
    Flatten SDK MetricsData into MetricPoint models.

    Args:
        metrics_data: opentelemetry.sdk.metrics.export.MetricsData (or None)
        name: Only return points of the instrument with this name

    Returns:
        List of MetricPoint models
    """
    if metrics_data is None:
        return []

    points = []
    for resource_metrics in metrics_data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                if name is not None and metric.name != name:
                    continue
                kind = _kind_of(metric.data)
                for data_point in metric.data.data_points:
                    if kind == InstrumentKind.HISTOGRAM:
                        point = MetricPoint(
                            name=metric.name,
                            kind=kind,
                            unit=metric.unit or "",
                            attributes=dict(data_point.attributes or {}),
                            value=data_point.sum,
                            count=data_point.count,
                            min=data_point.min,
                            max=data_point.max,
                            bucket_counts=list(data_point.bucket_counts),
                            explicit_bounds=list(data_point.explicit_bounds),
                            time_unix_nano=data_point.time_unix_nano,
                        )
                    else:
                        point = MetricPoint(
                            name=metric.name,
                            kind=kind,
                            unit=metric.unit or "",
                            attributes=dict(data_point.attributes or {}),
                            value=data_point.value,
                            time_unix_nano=data_point.time_unix_nano,
                        )
                    points.append(point)
    return points
