"""Load average collection.

Reads ``<root>/loadavg`` ("0.50 1.20 2.35 1/234 5678") when present,
otherwise ``sysctl -n vm.loadavg`` ("{ 0.50 1.20 2.35 }").
"""

import math
from pathlib import Path

from host_metrics.collectors.sources import first_line, read_source, run_command, source_exists
from host_metrics.store import Storage
from host_metrics.telemetry import SOURCE_SELECTED, get_logger

log = get_logger(__name__)

LOADAVG_COMMAND = ["sysctl", "-n", "vm.loadavg"]


def parse_loadavg(text: str) -> tuple[float, float, float]:
    """Parse the 1, 5 and 15 minute load averages.

    Enclosing braces (sysctl output) are trimmed before splitting.

    Raises:
        ValueError: If fewer than three numbers are present, or one is not a
            finite float.
    """
    fields = text.strip().strip("{}").split()
    if len(fields) < 3:
        raise ValueError(f"expected three load averages, got {text.strip()!r}")
    load1, load5, load15 = float(fields[0]), float(fields[1]), float(fields[2])
    if not all(math.isfinite(value) for value in (load1, load5, load15)):
        raise ValueError(f"non-finite load average in {text.strip()!r}")
    return load1, load5, load15


def collect_load_average(
    store: Storage, proc_root: Path, timeout: float | None = None
) -> None:
    """Save load averages into ``load/1``, ``load/5`` and ``load/15``."""
    path = proc_root / "loadavg"
    if source_exists(path):
        log.debug(SOURCE_SELECTED, fact="load", source=str(path))
        text = first_line(read_source(path), str(path))
    else:
        log.debug(SOURCE_SELECTED, fact="load", source=" ".join(LOADAVG_COMMAND))
        text = first_line(run_command(LOADAVG_COMMAND, timeout), "sysctl vm.loadavg")

    load1, load5, load15 = parse_loadavg(text)

    # The load gauges scale by 100 at save time
    store.save("load", "1", load1)
    store.save("load", "5", load5)
    store.save("load", "15", load15)
