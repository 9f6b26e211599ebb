"""Tests for data source helpers."""

import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from host_metrics.collectors.sources import (
    CollectionError,
    first_line,
    read_lines,
    run_command,
    source_exists,
)


class TestSourceExists:
    """Test the source availability probe."""

    def test_present(self, tmp_path: Path) -> None:
        path = tmp_path / "loadavg"
        path.write_text("0.00 0.00 0.00\n")
        assert source_exists(path) is True

    def test_absent(self, tmp_path: Path) -> None:
        assert source_exists(tmp_path / "loadavg") is False

    def test_parent_is_a_file(self, tmp_path: Path) -> None:
        """Test a root that is a regular file counts as absent."""
        root = tmp_path / "proc"
        root.write_text("")
        assert source_exists(root / "loadavg") is False

    def test_probe_error_propagates(self, tmp_path: Path) -> None:
        """Test probe failures other than absence are raised."""
        with patch.object(Path, "stat", side_effect=PermissionError("denied")):
            with pytest.raises(PermissionError):
                source_exists(tmp_path / "meminfo")


class TestRunCommand:
    """Test subprocess execution."""

    def test_combines_stdout_and_stderr(self) -> None:
        """Test stderr output is captured along with stdout."""
        output = run_command(
            [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr)"]
        )
        assert "out" in output
        assert "err" in output

    def test_non_zero_exit_raises(self) -> None:
        with pytest.raises(subprocess.CalledProcessError):
            run_command([sys.executable, "-c", "raise SystemExit(3)"])

    def test_missing_command_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            run_command(["definitely-not-a-real-command-xyz"])

    def test_timeout_passed_through(self) -> None:
        completed = subprocess.CompletedProcess(args=["df"], returncode=0, stdout="ok")
        with patch("host_metrics.collectors.sources.subprocess.run", return_value=completed) as m:
            assert run_command(["df"], timeout=2.5) == "ok"
        assert m.call_args.kwargs["timeout"] == 2.5
        assert m.call_args.kwargs["check"] is True


def test_read_lines() -> None:
    assert read_lines("a\nb\n") == ["a", "b"]
    assert read_lines("") == []


def test_first_line_empty() -> None:
    with pytest.raises(ValueError, match="no output from df"):
        first_line("", "df")


def test_collection_error_message() -> None:
    error = CollectionError("memory", "boom")
    assert error.collector == "memory"
    assert str(error) == "memory collection failed: boom"
