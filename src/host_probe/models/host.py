from __future__ import annotations

from dataclasses import dataclass

from host_probe.models.disk import DiskAggregate
from host_probe.models.memory import MemoryCheck, RamInfo


@dataclass(frozen=True)
class HostResourcesData:
    disk: DiskAggregate
    mountpoints: list[str]
    ram: RamInfo
    swap: RamInfo
    memory_check: MemoryCheck
    gpu: str
    notes: list[str]
