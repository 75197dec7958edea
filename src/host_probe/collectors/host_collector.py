from __future__ import annotations

import logging
from datetime import datetime

from host_probe.collectors.disk_collector import DiskCollector
from host_probe.collectors.gpu_collector import GpuCollector
from host_probe.collectors.memory_collector import MemoryCollector
from host_probe.models.common import STATUS_OK, STATUS_WARN, CollectorResult
from host_probe.models.host import HostResourcesData
from host_probe.rules import NO_GPU
from host_probe.services.config_service import ProbeConfig

logger = logging.getLogger(__name__)


class HostResourceCollector:
    def __init__(
        self,
        config: ProbeConfig | None = None,
        disk: DiskCollector | None = None,
        memory: MemoryCollector | None = None,
        gpu: GpuCollector | None = None,
    ) -> None:
        self.config = config or ProbeConfig()
        self.disk = disk or DiskCollector(config=self.config)
        self.memory = memory or MemoryCollector(config=self.config)
        self.gpu = gpu or GpuCollector()

    def collect(self) -> CollectorResult[HostResourcesData]:
        ts = datetime.now()
        warnings: list[str] = []
        notes: list[str] = []

        disk = self.disk.aggregate()
        try:
            mountpoints = self.disk.list_physical_mountpoints()
        except Exception as e:
            logger.debug("mountpoint listing failed: %s", e)
            notes.append(f"Mountpoint listing failed: {e}")
            mountpoints = []

        check = self.memory.check()
        if check.snapshot is None:
            notes.append("Kernel memory info unavailable; using platform counters")
        ram = check.configured
        swap = self.memory.resolve_swap()

        gpu = self.gpu.resolve_gpu_name()
        if gpu == NO_GPU:
            notes.append("No graphics adapter identified")

        if disk.total > 0 and disk.used_percent >= self.config.disk_warn_percent:
            warnings.append(f"Disk usage high: {disk.used_percent}% (>= {self.config.disk_warn_percent}%)")
        if ram.total > 0 and ram.used_percent >= self.config.mem_warn_percent:
            warnings.append(
                f"High memory usage [{ram.mode}]: {ram.used_percent}% (>= {self.config.mem_warn_percent}%)"
            )

        status = STATUS_OK if not warnings else STATUS_WARN
        data = HostResourcesData(
            disk=disk,
            mountpoints=mountpoints,
            ram=ram,
            swap=swap,
            memory_check=check,
            gpu=gpu,
            notes=notes,
        )
        return CollectorResult(
            ts=ts,
            status=status,
            warning_count=len(warnings),
            warnings=warnings,
            data=data,
        )
