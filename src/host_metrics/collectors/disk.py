"""Disk usage collection from ``df`` output.

Each mounted filesystem becomes a gauge in the dynamic ``disk`` family,
keyed by mount point::

    Filesystem     1K-blocks    Used Available Use% Mounted on
    /dev/sda1      102400000 51200000  51200000  50% /
"""

from pathlib import Path

from host_metrics.collectors.sources import read_lines, read_source, run_command
from host_metrics.store import MetricKind, Storage
from host_metrics.telemetry import DF_LINE_UNPARSEABLE, SOURCE_SELECTED, get_logger

log = get_logger(__name__)

DF_COMMAND = ["df"]


def parse_df(text: str) -> dict[str, int]:
    """Map mount point to percentage used.

    Only device lines (starting with "/") are considered. Lines with too few
    fields or a non-numeric percentage are logged and skipped.
    """
    usage: dict[str, int] = {}
    for line in read_lines(text):
        if not line.startswith("/"):
            continue
        fields = line.split()
        if len(fields) < 5:
            log.debug(DF_LINE_UNPARSEABLE, line=line, reason="too few fields")
            continue
        percent = fields[4]
        if not percent.endswith("%"):
            log.debug(DF_LINE_UNPARSEABLE, line=line, reason="no percentage field")
            continue
        try:
            value = int(percent[:-1])
        except ValueError:
            log.debug(DF_LINE_UNPARSEABLE, line=line, reason="non-numeric percentage")
            continue
        usage[fields[-1]] = value
    return usage


def collect_disk(
    store: Storage, df_path: Path | None = None, timeout: float | None = None
) -> None:
    """Save per-mount disk usage into the ``disk`` family.

    Args:
        store: Metric store.
        df_path: File holding df output to parse instead of running df.
        timeout: Timeout for the df command.
    """
    if df_path is None:
        log.debug(SOURCE_SELECTED, fact="disk", source=" ".join(DF_COMMAND))
        text = run_command(DF_COMMAND, timeout)
    else:
        log.debug(SOURCE_SELECTED, fact="disk", source=str(df_path))
        text = read_source(df_path)

    for mount, percent in parse_df(text).items():
        store.save_type("disk", mount, percent, MetricKind.GAUGE)
