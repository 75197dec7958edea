"""Narrow adapters over the operating system.

Collectors only talk to these; tests swap them for fixtures.
"""

from __future__ import annotations

import glob
import os
import subprocess
from typing import Protocol, Sequence

import psutil

from host_probe.models.disk import DiskUsage, PartitionRecord
from host_probe.models.memory import SwapReading, VirtualMemoryReading


class DiskSource(Protocol):
    def partitions(self) -> list[PartitionRecord]: ...

    def usage(self, mountpoint: str) -> DiskUsage: ...


class MemorySource(Protocol):
    def virtual_memory(self) -> VirtualMemoryReading: ...

    def swap_memory(self) -> SwapReading: ...


class CommandRunner(Protocol):
    def run(self, argv: Sequence[str]) -> str: ...


class PsutilDiskSource:
    def partitions(self) -> list[PartitionRecord]:
        # all=True: psutil's own filter drops fuseblk and container roots.
        rows: list[PartitionRecord] = []
        for p in psutil.disk_partitions(all=True):
            opts = frozenset(o.strip() for o in str(p.opts or "").split(",") if o.strip())
            rows.append(
                PartitionRecord(
                    device=str(p.device),
                    mountpoint=str(p.mountpoint),
                    fstype=str(p.fstype),
                    options=opts,
                )
            )
        return rows

    def usage(self, mountpoint: str) -> DiskUsage:
        u = psutil.disk_usage(mountpoint)
        return DiskUsage(total=int(u.total), used=int(u.used))


class PsutilMemorySource:
    def virtual_memory(self) -> VirtualMemoryReading:
        vm = psutil.virtual_memory()
        return VirtualMemoryReading(total=int(vm.total), available=int(vm.available), free=int(vm.free))

    def swap_memory(self) -> SwapReading:
        sm = psutil.swap_memory()
        return SwapReading(total=int(sm.total), used=int(sm.used))


class SubprocessRunner:
    def run(self, argv: Sequence[str]) -> str:
        return subprocess.check_output(list(argv), text=True, stderr=subprocess.DEVNULL)


class HostFilesystem:
    """Read-only view of the host tree, rooted at ``root``.

    Callers pass absolute host paths (``/proc/meminfo``); they are resolved
    under ``root`` so a temporary directory can stand in for the real host.
    Returned glob matches are host paths again.
    """

    def __init__(self, root: str = "/") -> None:
        self.root = root

    def _resolve(self, path: str) -> str:
        return os.path.join(self.root, path.lstrip("/"))

    def _unresolve(self, path: str) -> str:
        rel = os.path.relpath(path, self.root)
        return "/" + rel.replace(os.sep, "/")

    def read_text(self, path: str) -> str:
        with open(self._resolve(path), "r", encoding="utf-8", errors="replace") as f:
            return f.read()

    def read_bytes(self, path: str) -> bytes:
        with open(self._resolve(path), "rb") as f:
            return f.read()

    def glob(self, pattern: str) -> list[str]:
        return sorted(self._unresolve(p) for p in glob.glob(self._resolve(pattern)))

    def readlink(self, path: str) -> str:
        return os.readlink(self._resolve(path))
