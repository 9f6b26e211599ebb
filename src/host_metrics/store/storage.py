"""Metric store shared by the host collectors and rule evaluation.

The store is addressed by (family, submetric). An empty submetric names the
family aggregate, e.g. ``("cpu", "")`` is total CPU and ``("cpu", "user")``
user time. Collectors are the only writers; rule evaluation reads through
read() and raw_value().
"""

import threading

from host_metrics.config.validators import default_clock_ticks
from host_metrics.store.formatters import display_raw
from host_metrics.store.types import (
    CounterTransform,
    Formatter,
    GaugeTransform,
    Metric,
    MetricDeclarationError,
    MetricFamily,
    MetricKind,
    MetricSnapshot,
    UnknownMetricError,
)
from host_metrics.telemetry import (
    DYNAMIC_FAMILY_DECLARED,
    DYNAMIC_METRIC_DISCOVERED,
    METRIC_DECLARED,
    get_logger,
)

log = get_logger(__name__)


class Storage:
    """Typed metric store keeping the current and previous sample of each metric.

    Gauges report their latest sample. Counters report
    ``transform(current, previous)``, which only exists once two cycles have
    saved the counter.

    All access goes through one lock, so a reader sees either the old or the
    new (previous, current) pair of a metric, never a mix.

    Attributes:
        cycle_seconds: Configured sampling interval.
        clock_ticks: Kernel clock ticks per second.
        cycle_ticks: Clock ticks expected to elapse in one sampling interval.
    """

    def __init__(self, cycle_seconds: int, clock_ticks: int | None = None) -> None:
        """Initialize an empty store.

        Args:
            cycle_seconds: Sampling interval in seconds.
            clock_ticks: Clock ticks per second. Defaults to the platform value.

        Raises:
            ValueError: If either value is not positive.
        """
        if clock_ticks is None:
            clock_ticks = default_clock_ticks()
        if cycle_seconds <= 0:
            raise ValueError(f"cycle_seconds must be positive, got {cycle_seconds}")
        if clock_ticks <= 0:
            raise ValueError(f"clock_ticks must be positive, got {clock_ticks}")

        self.cycle_seconds = cycle_seconds
        self.clock_ticks = clock_ticks
        self.cycle_ticks = cycle_seconds * clock_ticks
        self._families: dict[str, MetricFamily] = {}
        self._lock = threading.RLock()

    # Declaration

    def declare_gauge(
        self,
        family: str,
        submetric: str,
        transform: GaugeTransform | None = None,
        formatter: Formatter = display_raw,
    ) -> None:
        """Declare a gauge, creating its family on first use.

        Args:
            family: Family name.
            submetric: Submetric name, "" for the family aggregate.
            transform: Applied to each sample at save time.
            formatter: Turns the stored integer into a display string.

        Raises:
            MetricDeclarationError: If the metric is already declared.
        """
        self._declare(family, submetric, MetricKind.GAUGE, transform, formatter)

    def declare_counter(
        self,
        family: str,
        submetric: str,
        transform: CounterTransform | None = None,
        formatter: Formatter = display_raw,
    ) -> None:
        """Declare a counter, creating its family on first use.

        Args:
            family: Family name.
            submetric: Submetric name, "" for the family aggregate.
            transform: Computes the reported value from (current, previous).
                Without one the counter reports the raw delta.
            formatter: Turns the reported integer into a display string.

        Raises:
            MetricDeclarationError: If the metric is already declared.
        """
        self._declare(family, submetric, MetricKind.COUNTER, transform, formatter)

    def declare_dynamic_family(
        self,
        name: str,
        gauge_transform: GaugeTransform | None = None,
        counter_transform: CounterTransform | None = None,
        formatter: Formatter = display_raw,
    ) -> None:
        """Declare a family whose submetrics are discovered while collecting.

        Args:
            name: Family name.
            gauge_transform: Transform given to implicitly created gauges.
            counter_transform: Transform given to implicitly created counters.
            formatter: Formatter given to implicitly created submetrics.

        Raises:
            MetricDeclarationError: If a family with this name already exists.
        """
        with self._lock:
            if name in self._families:
                raise MetricDeclarationError(f"Metric family '{name}' is already declared")
            self._families[name] = MetricFamily(
                name=name,
                dynamic=True,
                gauge_transform=gauge_transform,
                counter_transform=counter_transform,
                default_formatter=formatter,
            )
        log.debug(DYNAMIC_FAMILY_DECLARED, family=name)

    def _declare(
        self,
        family: str,
        submetric: str,
        kind: MetricKind,
        transform: GaugeTransform | CounterTransform | None,
        formatter: Formatter,
    ) -> None:
        with self._lock:
            fam = self._families.get(family)
            if fam is None:
                fam = MetricFamily(name=family)
                self._families[family] = fam
            if submetric in fam.metrics:
                raise MetricDeclarationError(
                    f"Metric '{family}({submetric})' is already declared"
                )
            fam.metrics[submetric] = Metric(kind=kind, formatter=formatter, transform=transform)
        log.debug(METRIC_DECLARED, family=family, submetric=submetric, kind=kind.value)

    # Writes

    def save(self, family: str, submetric: str, value: float) -> None:
        """Record a new sample, shifting the current one into previous.

        An unseen submetric of a dynamic family is created as a gauge.

        Raises:
            UnknownMetricError: If the family is unknown, or the family is
                static and the submetric was never declared.
        """
        self.save_type(family, submetric, value, MetricKind.GAUGE)

    def save_type(self, family: str, submetric: str, value: float, kind: MetricKind) -> None:
        """Record a new sample, creating a dynamic submetric of ``kind`` if needed.

        ``kind`` only matters when the submetric is created here; an existing
        metric keeps the kind it was declared with.

        Raises:
            UnknownMetricError: Same as save().
        """
        with self._lock:
            metric = self._lookup(family, submetric)
            if metric is None:
                fam = self._families.get(family)
                if fam is None or not fam.dynamic:
                    raise UnknownMetricError(family, submetric)
                metric = Metric(
                    kind=kind,
                    formatter=fam.default_formatter or display_raw,
                    transform=fam.default_transform(kind),
                )
                fam.metrics[submetric] = metric
                log.debug(
                    DYNAMIC_METRIC_DISCOVERED, family=family, submetric=submetric, kind=kind.value
                )
            metric.store(value)

    # Reads

    def read(self, family: str, submetric: str) -> str | None:
        """Return the display string for a metric.

        Returns:
            The formatted reported value, or None if the metric does not exist
            or has no reportable value yet (never saved, or a counter saved
            only once).
        """
        with self._lock:
            metric = self._lookup(family, submetric)
            if metric is None:
                return None
            value = metric.reported()
            if value is None:
                return None
            return metric.formatter(value)

    def raw_value(self, family: str, submetric: str) -> int | None:
        """Return the reported value before formatting, for rule evaluation.

        Returns None in the same cases as read().
        """
        with self._lock:
            metric = self._lookup(family, submetric)
            if metric is None:
                return None
            return metric.reported()

    def has_metric(self, family: str, submetric: str) -> bool:
        with self._lock:
            return self._lookup(family, submetric) is not None

    def metric(self, family: str, submetric: str) -> MetricSnapshot | None:
        """Return a frozen copy of a metric's kind and raw samples."""
        with self._lock:
            metric = self._lookup(family, submetric)
            if metric is None:
                return None
            return MetricSnapshot(
                family=family,
                submetric=submetric,
                kind=metric.kind,
                previous=metric.previous,
                current=metric.current,
            )

    def families(self) -> list[str]:
        with self._lock:
            return sorted(self._families)

    def submetrics(self, family: str) -> list[str]:
        """List the submetrics currently known in a family.

        Raises:
            UnknownMetricError: If the family does not exist.
        """
        with self._lock:
            fam = self._families.get(family)
            if fam is None:
                raise UnknownMetricError(family)
            return sorted(fam.metrics)

    def snapshot(self) -> dict[str, dict[str, str]]:
        """Display strings of every metric with a reportable value, by family."""
        result: dict[str, dict[str, str]] = {}
        with self._lock:
            for name, fam in self._families.items():
                for submetric, metric in fam.metrics.items():
                    value = metric.reported()
                    if value is not None:
                        result.setdefault(name, {})[submetric] = metric.formatter(value)
        return result

    # Transforms bound to this store's cycle length

    def tick_percentage(self, current: int, previous: int) -> int:
        """Share of one sampling interval spent in a CPU state, as a percentage."""
        return int(100 * (current - previous) / self.cycle_ticks)

    def _lookup(self, family: str, submetric: str) -> Metric | None:
        fam = self._families.get(family)
        if fam is None:
            return None
        return fam.metrics.get(submetric)
