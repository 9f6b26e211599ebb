"""Types for the host metric store.

Defines metric kinds, the per-metric two-slot value history, metric
families, and the errors raised by the store.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

# Gauges transform a sample at save time; counters transform (current, previous)
# at read time.
GaugeTransform = Callable[[float], int]
CounterTransform = Callable[[int, int], int]
Formatter = Callable[[int], str]


class StoreError(Exception):
    """Base class for metric store errors."""

    pass


class UnknownMetricError(StoreError, KeyError):
    """Raised when saving to (or listing) a metric or family that was never declared."""

    def __init__(self, family: str, submetric: str | None = None) -> None:
        self.family = family
        self.submetric = submetric
        if submetric is None:
            message = f"Unknown metric family '{family}'"
        else:
            message = f"Unknown metric '{family}({submetric})'"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class MetricDeclarationError(StoreError, ValueError):
    """Raised when a metric or family is declared twice."""

    pass


class MetricKind(str, Enum):
    """How a metric's reported value relates to its raw samples."""

    GAUGE = "gauge"
    COUNTER = "counter"


@dataclass(frozen=True)
class MetricSnapshot:
    """Immutable copy of a metric's state, safe to hand to readers."""

    family: str
    submetric: str
    kind: MetricKind
    previous: int | None
    current: int | None


@dataclass
class Metric:
    """A single metric and its two most recent raw samples.

    Kind, transform and formatter are fixed when the metric is declared;
    only ``previous`` and ``current`` change afterwards.
    """

    kind: MetricKind
    formatter: Formatter
    transform: GaugeTransform | CounterTransform | None = None
    previous: int | None = None
    current: int | None = None

    def store(self, value: float) -> None:
        """Shift ``current`` into ``previous`` and record a new sample."""
        if self.kind is MetricKind.GAUGE and self.transform is not None:
            raw = self.transform(value)  # type: ignore[call-arg]
        else:
            raw = value
        self.previous = self.current
        self.current = int(raw)

    def reported(self) -> int | None:
        """Return the value consumers see, or None if none is available yet.

        Counters need two samples; a single sample yields no rate rather than a
        delta against zero.
        """
        if self.current is None:
            return None
        if self.kind is MetricKind.GAUGE:
            return self.current
        if self.previous is None:
            return None
        if self.transform is None:
            return self.current - self.previous
        return int(self.transform(self.current, self.previous))  # type: ignore[call-arg]


@dataclass
class MetricFamily:
    """A named group of related metrics.

    Static families only accept declared sub-metrics. Dynamic families
    create members on first save, using the family defaults for the kind
    being created.
    """

    name: str
    dynamic: bool = False
    metrics: dict[str, Metric] = field(default_factory=dict)
    gauge_transform: GaugeTransform | None = None
    counter_transform: CounterTransform | None = None
    default_formatter: Formatter | None = None

    def default_transform(self, kind: MetricKind) -> GaugeTransform | CounterTransform | None:
        """Return the transform an implicitly created metric of ``kind`` gets."""
        if kind is MetricKind.GAUGE:
            return self.gauge_transform
        return self.counter_transform
