from __future__ import annotations

import logging

from host_probe.models.disk import DiskAggregate, DiskUsage, PartitionRecord
from host_probe.rules import (
    ALWAYS_PHYSICAL_FSTYPES,
    EXCLUDED_FSTYPES,
    EXCLUDED_MOUNTPOINTS,
    LOOP_DEVICE_PREFIX,
    NETWORK_OPTION_MARKERS,
    POOL_FSTYPES,
)
from host_probe.services.config_service import ProbeConfig
from host_probe.sources import DiskSource, PsutilDiskSource

logger = logging.getLogger(__name__)


def is_physical_disk(part: PartitionRecord) -> bool:
    """Decide whether a mount is real local storage. First matching rule wins."""
    # LXC and other loop-backed roots still count.
    if part.mountpoint == "/":
        return True

    mountpoint = part.mountpoint.lower()
    for mp in EXCLUDED_MOUNTPOINTS:
        if mountpoint == mp or mountpoint.startswith(mp):
            return False

    fstype = part.fstype.lower()

    # autofs trigger; the real filesystem shows up as its own partition.
    if fstype == "autofs" and not part.device.startswith("/dev/"):
        return False

    # ntfs-3g and friends
    if fstype in ALWAYS_PHYSICAL_FSTYPES:
        return True

    for fs in EXCLUDED_FSTYPES:
        if fstype == fs or fstype.startswith(fs):
            return False

    opts = ",".join(sorted(part.options)).lower()
    if any(marker in opts for marker in NETWORK_OPTION_MARKERS):
        return False

    if part.device.startswith(LOOP_DEVICE_PREFIX):
        return False

    return True


def logical_device_key(part: PartitionRecord) -> str:
    """Deduplication key: pool filesystems collapse ``pool/dataset`` to ``pool``."""
    key = part.device
    if part.fstype.lower() in POOL_FSTYPES:
        idx = key.find("/")
        if idx != -1:
            key = key[:idx]
    return key


class DiskCollector:
    def __init__(self, config: ProbeConfig | None = None, source: DiskSource | None = None) -> None:
        self.config = config or ProbeConfig()
        self.source = source or PsutilDiskSource()

    def aggregate(self) -> DiskAggregate:
        """Sum capacity and usage over the physical disks, one entry per logical device.

        An explicit mountpoint allow-list skips classification. Failing to
        enumerate partitions yields a zero aggregate.
        """
        try:
            partitions = self.source.partitions()
        except Exception as e:
            logger.debug("partition enumeration failed: %s", e)
            return DiskAggregate()

        allow = self.config.mountpoint_allow_list()
        if allow:
            return self._sum(self._usages(allow))

        devices: dict[str, DiskUsage] = {}
        for part in partitions:
            if not is_physical_disk(part):
                continue
            try:
                u = self.source.usage(part.mountpoint)
            except Exception as e:
                logger.debug("usage query failed for %s: %s", part.mountpoint, e)
                continue

            key = logical_device_key(part)
            existing = devices.get(key)
            # Larger total wins (quota'd datasets report less); ties go to the later entry.
            if existing is None or u.total >= existing.total:
                devices[key] = u

        return self._sum(devices.values())

    def list_physical_mountpoints(self) -> list[str]:
        """Describe what ``aggregate`` would count. Enumeration errors propagate."""
        allow = self.config.mountpoint_allow_list()
        if allow:
            return allow

        return [
            f"{part.mountpoint} ({part.fstype})"
            for part in self.source.partitions()
            if is_physical_disk(part)
        ]

    def _usages(self, mountpoints: list[str]) -> list[DiskUsage]:
        rows: list[DiskUsage] = []
        for mp in mountpoints:
            try:
                rows.append(self.source.usage(mp))
            except Exception as e:
                logger.debug("usage query failed for %s: %s", mp, e)
                continue
        return rows

    @staticmethod
    def _sum(usages) -> DiskAggregate:
        total = 0
        used = 0
        for u in usages:
            total += u.total
            used += u.used
        return DiskAggregate(total=total, used=used)
