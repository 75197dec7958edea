"""Tests for the combined host snapshot."""

from conftest import FakeDiskSource, FakeMemorySource, FakeRunner, add_drm_card, part, write_file
from host_probe.collectors.disk_collector import DiskCollector
from host_probe.collectors.gpu_collector import GpuCollector
from host_probe.collectors.host_collector import HostResourceCollector
from host_probe.collectors.memory_collector import MemoryCollector
from host_probe.models.disk import DiskUsage
from host_probe.models.memory import SwapReading, VirtualMemoryReading
from host_probe.services.config_service import ProbeConfig

MEMINFO = "MemTotal: 1000 kB\nMemFree: 800 kB\nSwapTotal: 100 kB\nSwapFree: 100 kB\n"


def build(host_root, host_fs, config: ProbeConfig, disk_source: FakeDiskSource) -> HostResourceCollector:
    return HostResourceCollector(
        config=config,
        disk=DiskCollector(config=config, source=disk_source),
        memory=MemoryCollector(
            config=config,
            source=FakeMemorySource(
                vm=VirtualMemoryReading(total=1000, available=100, free=50),
                swap=SwapReading(total=0, used=0),
            ),
            runner=FakeRunner(),
            fs=host_fs,
            system="linux",
        ),
        gpu=GpuCollector(runner=FakeRunner(), fs=host_fs),
    )


def test_collect_ok(host_root, host_fs) -> None:
    write_file(host_root, "/proc/meminfo", MEMINFO)
    add_drm_card(host_root, "card0", "i915")
    source = FakeDiskSource(
        partitions=[part("/dev/sda1", "/", "ext4")],
        usage={"/": DiskUsage(total=100, used=10)},
    )
    res = build(host_root, host_fs, ProbeConfig(), source).collect()

    assert res.status == "OK"
    assert res.ok is True
    assert res.warnings == []
    assert res.data.disk.total == 100
    assert res.data.mountpoints == ["/ (ext4)"]
    assert res.data.ram.mode == "htoplike"
    assert res.data.ram.used == 200 * 1024
    assert res.data.swap.total == 100 * 1024
    assert res.data.gpu == "Intel Integrated Graphics"
    assert res.data.notes == []


def test_collect_warns_and_notes(host_root, host_fs) -> None:
    source = FakeDiskSource(fail_enumeration=True)
    config = ProbeConfig(mem_warn_percent=80)
    res = build(host_root, host_fs, config, source).collect()

    assert res.status == "WARN"
    assert res.warning_count == 1
    assert "High memory usage [gopsutil]: 90%" in res.warnings[0]
    assert res.data.disk.total == 0
    assert res.data.mountpoints == []
    assert res.data.gpu == "None"
    assert any(n.startswith("Mountpoint listing failed") for n in res.data.notes)
    assert "No graphics adapter identified" in res.data.notes
    assert res.data.memory_check.snapshot is None


def test_disk_warning(host_root, host_fs) -> None:
    write_file(host_root, "/proc/meminfo", MEMINFO)
    source = FakeDiskSource(
        partitions=[part("/dev/sda1", "/", "ext4")],
        usage={"/": DiskUsage(total=100, used=95)},
    )
    res = build(host_root, host_fs, ProbeConfig(disk_warn_percent=90), source).collect()
    assert res.warnings == ["Disk usage high: 95% (>= 90%)"]
