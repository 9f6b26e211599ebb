"""CPU time collection from ``<root>/stat``.

The first line of stat holds cumulative clock ticks per CPU state::

    cpu  user nice system idle iowait irq softirq steal guest guest_nice

There is no command fallback: without the file no CPU metrics are saved
for the cycle.
"""

from dataclasses import dataclass
from pathlib import Path

from host_metrics.collectors.sources import first_line, read_source, source_exists
from host_metrics.store import Storage
from host_metrics.telemetry import CPU_SOURCE_ABSENT, SOURCE_SELECTED, get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class CPUTicks:
    """Cumulative clock ticks per CPU state since boot."""

    user: int
    nice: int
    system: int
    idle: int
    iowait: int
    irq: int
    softirq: int
    steal: int

    @property
    def busy(self) -> int:
        """Ticks spent in every state except idle."""
        return (
            self.user + self.nice + self.system + self.iowait + self.irq + self.softirq + self.steal
        )


def parse_stat(line: str) -> CPUTicks:
    """Parse the aggregate ``cpu`` line of stat.

    Raises:
        ValueError: If the line is not a cpu line with eight counters or a
            counter is not an integer.
    """
    fields = line.split()
    if len(fields) < 9 or fields[0] != "cpu":
        raise ValueError(f"unexpected stat line {line!r}")
    counters = [int(value) for value in fields[1:9]]
    return CPUTicks(*counters)


def collect_cpu(store: Storage, proc_root: Path) -> None:
    """Save CPU tick counters into the ``cpu`` family."""
    path = proc_root / "stat"
    if not source_exists(path):
        log.debug(CPU_SOURCE_ABSENT, source=str(path))
        return

    log.debug(SOURCE_SELECTED, fact="cpu", source=str(path))
    ticks = parse_stat(first_line(read_source(path), str(path)))

    store.save("cpu", "", ticks.busy)
    store.save("cpu", "user", ticks.user)
    store.save("cpu", "system", ticks.system)
    store.save("cpu", "iowait", ticks.iowait)
    store.save("cpu", "steal", ticks.steal)
