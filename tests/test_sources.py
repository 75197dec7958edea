"""Tests for the OS adapters."""

from types import SimpleNamespace
from unittest.mock import patch

from conftest import add_drm_card, write_file
from host_probe.models.disk import DiskUsage, PartitionRecord
from host_probe.models.memory import SwapReading, VirtualMemoryReading
from host_probe.sources import PsutilDiskSource, PsutilMemorySource, SubprocessRunner


def test_psutil_partitions_split_options() -> None:
    fake = [SimpleNamespace(device="/dev/sda1", mountpoint="/", fstype="ext4", opts="rw,relatime")]
    with patch("host_probe.sources.psutil") as mock_psutil:
        mock_psutil.disk_partitions.return_value = fake
        rows = PsutilDiskSource().partitions()
        mock_psutil.disk_partitions.assert_called_once_with(all=True)
    assert rows == [
        PartitionRecord(device="/dev/sda1", mountpoint="/", fstype="ext4", options=frozenset({"rw", "relatime"}))
    ]


def test_psutil_usage() -> None:
    with patch("host_probe.sources.psutil") as mock_psutil:
        mock_psutil.disk_usage.return_value = SimpleNamespace(total=100, used=40, free=60, percent=40.0)
        assert PsutilDiskSource().usage("/") == DiskUsage(total=100, used=40)


def test_psutil_memory() -> None:
    with patch("host_probe.sources.psutil") as mock_psutil:
        mock_psutil.virtual_memory.return_value = SimpleNamespace(total=1000, available=600, free=100)
        mock_psutil.swap_memory.return_value = SimpleNamespace(total=50, used=5)
        source = PsutilMemorySource()
        assert source.virtual_memory() == VirtualMemoryReading(total=1000, available=600, free=100)
        assert source.swap_memory() == SwapReading(total=50, used=5)


def test_subprocess_runner() -> None:
    with patch("host_probe.sources.subprocess.check_output", return_value="out\n") as mock_run:
        assert SubprocessRunner().run(("free", "-b")) == "out\n"
    assert mock_run.call_args.args[0] == ["free", "-b"]


def test_host_filesystem_rooted(host_root, host_fs) -> None:
    write_file(host_root, "/proc/meminfo", "MemTotal: 1 kB\n")
    add_drm_card(host_root, "card1", "i915")
    add_drm_card(host_root, "card0", "amdgpu")

    assert host_fs.read_text("/proc/meminfo") == "MemTotal: 1 kB\n"
    assert host_fs.glob("/sys/class/drm/card*") == ["/sys/class/drm/card0", "/sys/class/drm/card1"]
    assert host_fs.readlink("/sys/class/drm/card0/device/driver").endswith("/amdgpu")
