"""Swap usage collection.

Linux exposes swap totals in ``<root>/meminfo``; macOS only through
``sysctl -n vm.swapusage``, whose output looks like::

    total = 1024.00M  used = 714.75M  free = 309.25M  (encrypted)

Both are reduced to a single percentage saved as ``swap``.
"""

import re
from pathlib import Path

from host_metrics.collectors.sources import (
    first_line,
    read_lines,
    read_source,
    run_command,
    source_exists,
)
from host_metrics.store import Storage
from host_metrics.telemetry import (
    MEMINFO_LINE_UNRECOGNIZED,
    SOURCE_SELECTED,
    SWAP_SUFFIX_UNRECOGNIZED,
    get_logger,
)

log = get_logger(__name__)

SWAPUSAGE_COMMAND = ["sysctl", "-n", "vm.swapusage"]

MEMINFO_LINE = re.compile(r"([^:]+):\s+(\d+)")
SWAP_FIELD = re.compile(r"= (\d+\.\d{2})([A-Za-z])(.*)")

# Multipliers to KiB
SIZE_SUFFIXES = {
    "k": 1,
    "m": 1024,
    "g": 1024 * 1024,
    "t": 1024 * 1024 * 1024,
}


def parse_meminfo(text: str) -> dict[str, int]:
    """Parse ``Key: value`` lines into a lookup.

    Lines that do not match are logged and skipped.
    """
    values: dict[str, int] = {}
    for line in read_lines(text):
        if not line:
            continue
        match = MEMINFO_LINE.match(line)
        if match is None:
            log.warning(MEMINFO_LINE_UNRECOGNIZED, line=line)
            continue
        values[match.group(1)] = int(match.group(2))
    return values


def swap_used_percent(free: int, total: int) -> int:
    """Percentage of swap in use given free and total sizes.

    No swap free at all (including no swap configured) counts as fully used.

    Raises:
        ValueError: If swap is free but the total is missing or not positive.
    """
    if free == 0:
        return 100
    if free == total:
        return 0
    if total <= 0:
        raise ValueError(f"no SwapTotal in meminfo (SwapFree {free})")
    return 100 - round(100 * free / total)


def normalize_size(value: float, suffix: str) -> float:
    """Convert a size with a K/M/G/T suffix to KiB.

    An unrecognized suffix is taken to be KiB already.
    """
    multiplier = SIZE_SUFFIXES.get(suffix.lower())
    if multiplier is None:
        log.debug(SWAP_SUFFIX_UNRECOGNIZED, suffix=suffix, value=value)
        return value
    return value * multiplier


def parse_swapusage(line: str) -> tuple[float, float]:
    """Extract total and used swap, in KiB, from sysctl vm.swapusage output.

    Raises:
        ValueError: If the total or used field is missing.
    """
    total_match = SWAP_FIELD.search(line)
    if total_match is None:
        raise ValueError(f"no swap total in {line!r}")
    used_match = SWAP_FIELD.search(total_match.group(3))
    if used_match is None:
        raise ValueError(f"no swap used in {line!r}")

    total = normalize_size(float(total_match.group(1)), total_match.group(2))
    used = normalize_size(float(used_match.group(1)), used_match.group(2))
    return total, used


def collect_memory(store: Storage, proc_root: Path, timeout: float | None = None) -> None:
    """Save swap usage percentage into ``swap``."""
    path = proc_root / "meminfo"
    if source_exists(path):
        log.debug(SOURCE_SELECTED, fact="swap", source=str(path))
        meminfo = parse_meminfo(read_source(path))
        percent = swap_used_percent(meminfo.get("SwapFree", 0), meminfo.get("SwapTotal", 0))
    else:
        log.debug(SOURCE_SELECTED, fact="swap", source=" ".join(SWAPUSAGE_COMMAND))
        line = first_line(run_command(SWAPUSAGE_COMMAND, timeout), "sysctl vm.swapusage")
        total, used = parse_swapusage(line)
        percent = 100 if total == 0 else int(100 * used / total)

    store.save("swap", "", percent)
