"""Typed metric store with gauge and counter semantics."""

from host_metrics.store.formatters import (
    display_in_mb,
    display_load,
    display_percent,
    display_raw,
    scale_by_100,
)
from host_metrics.store.storage import Storage
from host_metrics.store.types import (
    Metric,
    MetricDeclarationError,
    MetricFamily,
    MetricKind,
    MetricSnapshot,
    StoreError,
    UnknownMetricError,
)

__all__ = [
    "Storage",
    "Metric",
    "MetricFamily",
    "MetricKind",
    "MetricSnapshot",
    "StoreError",
    "UnknownMetricError",
    "MetricDeclarationError",
    "display_percent",
    "display_load",
    "display_in_mb",
    "display_raw",
    "scale_by_100",
]
