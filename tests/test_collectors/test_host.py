"""Tests for the host schema and the collection pass."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from host_metrics import CollectionError, UnknownMetricError, collect_host, new_host_store
from host_metrics.config import HostMetricsConfig, reset_settings
from host_metrics.store import MetricKind, Storage

MEMINFO = "MemTotal: 8048936 kB\nSwapTotal: 2000 kB\nSwapFree: 1500 kB\n"
DF = "Filesystem 1K-blocks Used Available Use% Mounted on\n/dev/sda1 100G 50G 50G 50% /\n"


def _stat(user: int) -> str:
    return f"cpu  {user} 0 0 10000 0 0 0 0 0 0\n"


@pytest.fixture
def proc_root(tmp_path: Path) -> Path:
    root = tmp_path / "proc"
    root.mkdir()
    (root / "loadavg").write_text("0.50 1.20 2.35 1/234 5678\n")
    (root / "meminfo").write_text(MEMINFO)
    (root / "stat").write_text(_stat(0))
    return root


@pytest.fixture
def df_file(tmp_path: Path) -> Path:
    path = tmp_path / "df.txt"
    path.write_text(DF)
    return path


@pytest.fixture
def settings(proc_root: Path, df_file: Path) -> HostMetricsConfig:
    return HostMetricsConfig(proc_root=proc_root, df_path=df_file, cycle_seconds=15, clock_ticks=100)


@pytest.fixture
def store() -> Storage:
    return new_host_store(cycle_seconds=15, clock_ticks=100)


class TestNewHostStore:
    """Test the declared host schema."""

    def test_families(self, store: Storage) -> None:
        assert store.families() == ["cpu", "disk", "load", "swap"]
        assert store.submetrics("load") == ["1", "15", "5"]
        assert store.submetrics("cpu") == ["", "iowait", "steal", "system", "user"]
        assert store.submetrics("disk") == ["/"]

    def test_kinds(self, store: Storage) -> None:
        cpu = store.metric("cpu", "")
        swap = store.metric("swap", "")
        assert cpu is not None and cpu.kind is MetricKind.COUNTER
        assert swap is not None and swap.kind is MetricKind.GAUGE

    def test_cycle_divisor(self) -> None:
        store = new_host_store(cycle_seconds=30, clock_ticks=250)
        assert store.cycle_ticks == 7500

    def test_cycle_from_settings(self, settings: HostMetricsConfig) -> None:
        """Test the divisor comes from configuration when not given."""
        configured = settings.model_copy(update={"cycle_seconds": 20, "clock_ticks": 50})
        store = new_host_store(settings=configured)
        assert store.cycle_seconds == 20
        assert store.clock_ticks == 50
        assert store.cycle_ticks == configured.cycle_ticks == 1000

    def test_explicit_values_override_settings(self, settings: HostMetricsConfig) -> None:
        store = new_host_store(cycle_seconds=30, settings=settings)
        assert store.cycle_seconds == 30
        assert store.clock_ticks == settings.clock_ticks

    def test_cycle_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test HOSTMETRICS_CYCLE_SECONDS reaches the store via the singleton."""
        monkeypatch.setenv("HOSTMETRICS_CYCLE_SECONDS", "60")
        monkeypatch.setenv("HOSTMETRICS_CLOCK_TICKS", "100")
        reset_settings()
        try:
            store = new_host_store()
        finally:
            reset_settings()
        assert store.cycle_ticks == 6000

    def test_static_families_reject_unknown(self, store: Storage) -> None:
        with pytest.raises(UnknownMetricError):
            store.save("cpu", "nice", 10)
        assert store.read("cpu", "nice") is None


class TestCollectHost:
    """Test full collection passes."""

    def test_single_pass(
        self, store: Storage, proc_root: Path, df_file: Path, settings: HostMetricsConfig
    ) -> None:
        """Test one pass fills gauges; counters wait for a second pass."""
        collect_host(store, proc_root, df_file, settings=settings)

        assert store.read("load", "1") == "0.50"
        assert store.read("load", "5") == "1.20"
        assert store.read("load", "15") == "2.35"
        assert store.read("swap", "") == "25%"
        assert store.read("disk", "/") == "50%"
        assert store.read("cpu", "") is None

    def test_two_passes_give_cpu_rates(
        self, store: Storage, proc_root: Path, settings: HostMetricsConfig
    ) -> None:
        """Test CPU counters report after the second pass (1500 ticks per cycle)."""
        collect_host(store, settings=settings)
        (proc_root / "stat").write_text(_stat(750))
        collect_host(store, settings=settings)

        assert store.read("cpu", "user") == "50%"
        assert store.read("cpu", "") == "50%"
        assert store.read("cpu", "system") == "0%"

    def test_paths_default_to_settings(self, store: Storage, settings: HostMetricsConfig) -> None:
        collect_host(store, settings=settings)
        assert store.raw_value("load", "1") == 50
        assert store.raw_value("disk", "/") == 50

    def test_string_paths_accepted(self, store: Storage, proc_root: Path, df_file: Path) -> None:
        settings = HostMetricsConfig(cycle_seconds=15, clock_ticks=100)
        collect_host(store, str(proc_root), str(df_file), settings=settings)
        assert store.raw_value("swap", "") == 25

    def test_missing_cpu_source_does_not_abort(
        self, store: Storage, proc_root: Path, settings: HostMetricsConfig
    ) -> None:
        """Test an absent stat file skips CPU and disk still runs."""
        (proc_root / "stat").unlink()
        collect_host(store, settings=settings)
        assert store.read("disk", "/") == "50%"

    def test_failure_aborts_rest_of_pass(
        self, store: Storage, proc_root: Path, settings: HostMetricsConfig
    ) -> None:
        """Test a memory failure stops cpu and disk for this pass."""
        (proc_root / "meminfo").unlink()
        (proc_root / "meminfo").mkdir()  # present but unreadable as a file

        with pytest.raises(CollectionError) as exc_info:
            collect_host(store, settings=settings)

        assert exc_info.value.collector == "memory"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert store.read("load", "1") == "0.50"
        cpu = store.metric("cpu", "")
        assert cpu is not None and cpu.current is None
        assert store.read("disk", "/") is None

    def test_parse_failure_is_collection_error(
        self, store: Storage, proc_root: Path, settings: HostMetricsConfig
    ) -> None:
        (proc_root / "loadavg").write_text("not a load average\n")
        with pytest.raises(CollectionError, match="load collection failed"):
            collect_host(store, settings=settings)
        assert store.read("swap", "") is None

    def test_meminfo_without_swap_total_is_collection_error(
        self, store: Storage, proc_root: Path, settings: HostMetricsConfig
    ) -> None:
        """Test a meminfo missing SwapTotal fails the pass as a memory error."""
        (proc_root / "meminfo").write_text("SwapFree: 100 kB\n")

        with pytest.raises(CollectionError) as exc_info:
            collect_host(store, settings=settings)

        assert exc_info.value.collector == "memory"
        assert isinstance(exc_info.value.__cause__, ValueError)
        assert store.read("disk", "/") is None

    def test_infinite_load_is_collection_error(
        self, store: Storage, proc_root: Path, settings: HostMetricsConfig
    ) -> None:
        (proc_root / "loadavg").write_text("inf 1.20 2.35 1/2 3\n")

        with pytest.raises(CollectionError) as exc_info:
            collect_host(store, settings=settings)

        assert exc_info.value.collector == "load"
        assert store.read("load", "1") is None

    def test_arithmetic_error_is_collection_error(
        self, store: Storage, settings: HostMetricsConfig
    ) -> None:
        """Test arithmetic failures inside a collector are wrapped too."""
        with patch(
            "host_metrics.collectors.host.collect_cpu",
            side_effect=OverflowError("cannot convert float infinity to integer"),
        ):
            with pytest.raises(CollectionError) as exc_info:
                collect_host(store, settings=settings)

        assert exc_info.value.collector == "cpu"
        assert isinstance(exc_info.value.__cause__, OverflowError)

    def test_command_failure_is_collection_error(
        self, store: Storage, proc_root: Path, tmp_path: Path
    ) -> None:
        """Test a failing df run (no override file) aborts the pass."""
        settings = HostMetricsConfig(proc_root=proc_root, cycle_seconds=15, clock_ticks=100)
        error = subprocess.CalledProcessError(1, ["df"], output="df: cannot read table")
        with patch("host_metrics.collectors.sources.subprocess.run", side_effect=error):
            with pytest.raises(CollectionError) as exc_info:
                collect_host(store, settings=settings)

        assert exc_info.value.collector == "disk"
        assert isinstance(exc_info.value.__cause__, subprocess.CalledProcessError)

    def test_command_timeout_from_settings(self, store: Storage, tmp_path: Path) -> None:
        """Test the configured timeout reaches the fallback commands."""
        settings = HostMetricsConfig(
            proc_root=tmp_path / "empty", cycle_seconds=15, clock_ticks=100,
            command_timeout_seconds=3.0,
        )
        outputs = {
            "vm.loadavg": "{ 0.10 0.20 0.30 }\n",
            "vm.swapusage": "total = 1024.00M  used = 256.00M  free = 768.00M\n",
        }

        def fake_run(args: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
            assert kwargs["timeout"] == 3.0
            stdout = outputs.get(args[-1], DF)
            return subprocess.CompletedProcess(args=args, returncode=0, stdout=stdout)

        with patch("host_metrics.collectors.sources.subprocess.run", side_effect=fake_run):
            collect_host(store, settings=settings)

        assert store.read("load", "15") == "0.30"
        assert store.read("swap", "") == "25%"
        assert store.read("disk", "/") == "50%"
