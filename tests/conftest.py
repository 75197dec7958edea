from __future__ import annotations

import os
from pathlib import Path

import pytest

from host_probe.models.disk import DiskUsage, PartitionRecord
from host_probe.models.memory import SwapReading, VirtualMemoryReading
from host_probe.sources import HostFilesystem


class FakeDiskSource:
    def __init__(
        self,
        partitions: list[PartitionRecord] | None = None,
        usage: dict[str, DiskUsage] | None = None,
        fail_enumeration: bool = False,
    ) -> None:
        self._partitions = partitions or []
        self._usage = usage or {}
        self.fail_enumeration = fail_enumeration
        self.queried: list[str] = []

    def partitions(self) -> list[PartitionRecord]:
        if self.fail_enumeration:
            raise PermissionError("cannot read /proc/self/mounts")
        return list(self._partitions)

    def usage(self, mountpoint: str) -> DiskUsage:
        self.queried.append(mountpoint)
        if mountpoint not in self._usage:
            raise FileNotFoundError(mountpoint)
        return self._usage[mountpoint]


class FakeMemorySource:
    def __init__(
        self,
        vm: VirtualMemoryReading | None = None,
        swap: SwapReading | None = None,
    ) -> None:
        self.vm = vm
        self.swap = swap

    def virtual_memory(self) -> VirtualMemoryReading:
        if self.vm is None:
            raise RuntimeError("no virtual memory reading")
        return self.vm

    def swap_memory(self) -> SwapReading:
        if self.swap is None:
            raise RuntimeError("no swap reading")
        return self.swap


class FakeRunner:
    def __init__(self, outputs: dict[str, str] | None = None) -> None:
        self.outputs = outputs or {}
        self.calls: list[list[str]] = []

    def run(self, argv) -> str:
        argv = list(argv)
        self.calls.append(argv)
        if argv[0] not in self.outputs:
            raise FileNotFoundError(argv[0])
        return self.outputs[argv[0]]


def part(device: str, mountpoint: str, fstype: str, *opts: str) -> PartitionRecord:
    return PartitionRecord(device=device, mountpoint=mountpoint, fstype=fstype, options=frozenset(opts))


@pytest.fixture
def host_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def host_fs(host_root: Path) -> HostFilesystem:
    return HostFilesystem(root=str(host_root))


def write_file(root: Path, path: str, content: str | bytes) -> Path:
    p = root / path.lstrip("/")
    p.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        p.write_bytes(content)
    else:
        p.write_text(content, encoding="utf-8")
    return p


def add_drm_card(root: Path, card: str, driver: str | None, compatible: bytes | None = None) -> Path:
    card_dir = root / "sys" / "class" / "drm" / card
    device = card_dir / "device"
    device.mkdir(parents=True, exist_ok=True)
    if driver is not None:
        os.symlink(f"../../../../bus/platform/drivers/{driver}", device / "driver")
    if compatible is not None:
        (device / "of_node").mkdir(parents=True, exist_ok=True)
        (device / "of_node" / "compatible").write_bytes(compatible)
    return card_dir
