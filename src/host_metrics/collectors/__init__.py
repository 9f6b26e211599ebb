"""Host metric collectors.

Each collector reads one operating-system fact and saves it into the store:

- load.py: load averages (loadavg, fallback sysctl vm.loadavg)
- memory.py: swap usage (meminfo, fallback sysctl vm.swapusage)
- cpu.py: CPU tick counters (stat, no fallback)
- disk.py: per-mount disk usage (df)
- host.py: the host schema and the collection pass running all of the above
"""

from host_metrics.collectors.cpu import collect_cpu
from host_metrics.collectors.disk import collect_disk
from host_metrics.collectors.host import collect_host, new_host_store
from host_metrics.collectors.load import collect_load_average
from host_metrics.collectors.memory import collect_memory
from host_metrics.collectors.sources import CollectionError

__all__ = [
    "collect_host",
    "new_host_store",
    "collect_load_average",
    "collect_memory",
    "collect_cpu",
    "collect_disk",
    "CollectionError",
]
