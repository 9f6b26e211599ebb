"""Data source helpers shared by the host collectors.

Each collector prefers a pseudo-file and falls back to a system command.
The choice is an explicit probe (source_exists) so that a missing file is a
normal branch rather than a recovered failure.
"""

import subprocess
from pathlib import Path


class CollectionError(Exception):
    """Raised when a collector fails and the collection pass is aborted.

    Attributes:
        collector: Name of the collector that failed.
    """

    def __init__(self, collector: str, message: str) -> None:
        self.collector = collector
        super().__init__(f"{collector} collection failed: {message}")


def source_exists(path: Path) -> bool:
    """Probe whether a source file is present.

    Returns:
        True if the path exists, False if it (or a parent) is missing.

    Raises:
        OSError: If the probe itself fails, e.g. permission denied on a parent.
    """
    try:
        path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return False
    return True


def read_source(path: Path) -> str:
    """Read a text source in full."""
    return path.read_text(encoding="utf-8", errors="replace")


def run_command(args: list[str], timeout: float | None = None) -> str:
    """Run a command and return stdout and stderr combined.

    Args:
        args: Command and arguments.
        timeout: Seconds to wait before giving up; None waits indefinitely.

    Raises:
        FileNotFoundError: If the command is not installed.
        subprocess.CalledProcessError: If the command exits non-zero.
        subprocess.TimeoutExpired: If the timeout elapses.
    """
    result = subprocess.run(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        timeout=timeout,
        check=True,
    )
    return result.stdout


def read_lines(text: str) -> list[str]:
    """Split output into lines, dropping the trailing empty line."""
    return text.splitlines()


def first_line(text: str, source: str) -> str:
    """Return the first line of ``text``.

    Raises:
        ValueError: If the text is empty.
    """
    lines = read_lines(text)
    if not lines:
        raise ValueError(f"no output from {source}")
    return lines[0]
