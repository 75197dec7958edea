from __future__ import annotations

from dataclasses import dataclass, field

MODE_HTOPLIKE = "htoplike"
MODE_GOPSUTIL = "gopsutil"
MODE_CALL_FREE = "callFree"
MODE_INCLUDE_CACHE = "includeCache"


@dataclass(frozen=True)
class MeminfoSnapshot:
    """Counters from /proc/meminfo, in bytes. Absent keys stay zero."""

    MemTotal: int = 0
    MemFree: int = 0
    MemAvailable: int = 0
    Buffers: int = 0
    Cached: int = 0
    SwapTotal: int = 0
    SwapFree: int = 0
    SwapCached: int = 0
    Shmem: int = 0
    SReclaimable: int = 0
    Zswap: int = 0
    Zswapped: int = 0


@dataclass(frozen=True)
class RamInfo:
    total: int = 0
    used: int = 0
    mode: str = ""

    @property
    def used_percent(self) -> int:
        if self.total <= 0:
            return 0
        return int(self.used * 100 / self.total)


@dataclass(frozen=True)
class VirtualMemoryReading:
    total: int
    available: int
    free: int


@dataclass(frozen=True)
class SwapReading:
    total: int
    used: int


@dataclass(frozen=True)
class MemoryCheck:
    snapshot: MeminfoSnapshot | None
    models: list[RamInfo] = field(default_factory=list)
    configured: RamInfo = field(default_factory=RamInfo)
