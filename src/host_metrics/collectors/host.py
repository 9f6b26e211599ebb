"""Host collection pass and the standard host metric schema.

A scheduler calls collect_host() once per sampling interval with the store
built by new_host_store(). Collectors run in order (load, memory, cpu, disk);
the first failure aborts the rest of the pass and is raised to the caller.
"""

import subprocess
import time
from pathlib import Path
from typing import Callable

from host_metrics.collectors.cpu import collect_cpu
from host_metrics.collectors.disk import collect_disk
from host_metrics.collectors.load import collect_load_average
from host_metrics.collectors.memory import collect_memory
from host_metrics.collectors.sources import CollectionError
from host_metrics.config import HostMetricsConfig, get_settings
from host_metrics.store import (
    Storage,
    StoreError,
    display_load,
    display_percent,
    scale_by_100,
)
from host_metrics.telemetry import (
    HOST_COLLECTION_COMPLETED,
    HOST_COLLECTION_FAILED,
    HOST_COLLECTION_STARTED,
    get_logger,
)

log = get_logger(__name__)

CPU_SUBMETRICS = ("", "user", "system", "iowait", "steal")


def new_host_store(
    cycle_seconds: int | None = None,
    clock_ticks: int | None = None,
    settings: HostMetricsConfig | None = None,
) -> Storage:
    """Build a store with the host metric schema declared.

    Args:
        cycle_seconds: Sampling interval, used as the CPU rate divisor.
            Defaults to settings.cycle_seconds.
        clock_ticks: Clock ticks per second. Defaults to settings.clock_ticks.
        settings: Configuration consulted for missing values. Defaults to the
            settings singleton.

    Returns:
        Storage with swap, load, cpu and disk families declared.
    """
    if cycle_seconds is None or clock_ticks is None:
        if settings is None:
            settings = get_settings()
        if cycle_seconds is None:
            cycle_seconds = settings.cycle_seconds
        if clock_ticks is None:
            clock_ticks = settings.clock_ticks

    store = Storage(cycle_seconds, clock_ticks)

    store.declare_gauge("swap", "", formatter=display_percent)
    for window in ("1", "5", "15"):
        store.declare_gauge("load", window, transform=scale_by_100, formatter=display_load)
    for submetric in CPU_SUBMETRICS:
        store.declare_counter(
            "cpu", submetric, transform=store.tick_percentage, formatter=display_percent
        )
    store.declare_dynamic_family("disk", formatter=display_percent)
    store.declare_gauge("disk", "/", formatter=display_percent)

    return store


def collect_host(
    store: Storage,
    proc_root: Path | str | None = None,
    df_path: Path | str | None = None,
    settings: HostMetricsConfig | None = None,
) -> None:
    """Run one collection pass into ``store``.

    Args:
        store: Store built by new_host_store().
        proc_root: Pseudo-filesystem root. Defaults to settings.proc_root.
        df_path: File with df output to use instead of running df.
            Defaults to settings.df_path.
        settings: Configuration. Defaults to the settings singleton.

    Raises:
        CollectionError: From the first collector that fails, chained to the
            underlying error. Collectors after it do not run this pass.
    """
    if settings is None:
        settings = get_settings()
    root = Path(proc_root) if proc_root is not None else settings.proc_root
    if df_path is None:
        df_path = settings.df_path
    df_file = Path(df_path) if df_path is not None else None
    timeout = settings.command_timeout_seconds

    collectors: list[tuple[str, Callable[[], None]]] = [
        ("load", lambda: collect_load_average(store, root, timeout)),
        ("memory", lambda: collect_memory(store, root, timeout)),
        ("cpu", lambda: collect_cpu(store, root)),
        ("disk", lambda: collect_disk(store, df_file, timeout)),
    ]

    start = time.monotonic()
    log.debug(HOST_COLLECTION_STARTED, proc_root=str(root))

    for name, collect in collectors:
        try:
            collect()
        except (
            OSError,
            subprocess.SubprocessError,
            ValueError,
            ArithmeticError,
            StoreError,
        ) as e:
            log.error(
                HOST_COLLECTION_FAILED,
                collector=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise CollectionError(name, str(e)) from e

    log.debug(
        HOST_COLLECTION_COMPLETED,
        duration_ms=round((time.monotonic() - start) * 1000, 2),
        families=store.families(),
    )
