"""Host metrics for the monitoring agent.

Samples CPU, load average, swap and disk usage into a typed metric store
that rule evaluation reads.

Example:
    >>> from host_metrics import collect_host, new_host_store
    >>> store = new_host_store(cycle_seconds=15)
    >>> collect_host(store)
    >>> store.read("load", "1")
    '0.42'
"""

from host_metrics.collectors import CollectionError, collect_host, new_host_store
from host_metrics.store import (
    MetricDeclarationError,
    MetricKind,
    Storage,
    StoreError,
    UnknownMetricError,
)

__all__ = [
    "collect_host",
    "new_host_store",
    "Storage",
    "MetricKind",
    "StoreError",
    "UnknownMetricError",
    "MetricDeclarationError",
    "CollectionError",
]
