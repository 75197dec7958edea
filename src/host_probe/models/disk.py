from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PartitionRecord:
    device: str
    mountpoint: str
    fstype: str
    options: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class DiskUsage:
    total: int
    used: int


@dataclass(frozen=True)
class DiskAggregate:
    # used <= total is not enforced; sources may report otherwise.
    total: int = 0
    used: int = 0

    @property
    def used_percent(self) -> int:
        if self.total <= 0:
            return 0
        return int(self.used * 100 / self.total)
