from __future__ import annotations

import dataclasses
import logging
import platform
from typing import Callable

from host_probe.models.memory import (
    MODE_CALL_FREE,
    MODE_GOPSUTIL,
    MODE_HTOPLIKE,
    MODE_INCLUDE_CACHE,
    MeminfoSnapshot,
    MemoryCheck,
    RamInfo,
)
from host_probe.services.config_service import ProbeConfig
from host_probe.sources import (
    CommandRunner,
    HostFilesystem,
    MemorySource,
    PsutilMemorySource,
    SubprocessRunner,
)

logger = logging.getLogger(__name__)

MEMINFO_PATH = "/proc/meminfo"
FREE_COMMAND = ("free", "-b")
FREE_PLATFORMS = frozenset({"linux", "freebsd"})

_MEMINFO_KEYS = frozenset(f.name for f in dataclasses.fields(MeminfoSnapshot))


def parse_meminfo(text: str) -> MeminfoSnapshot:
    """Parse ``KEY: <value> kB`` lines into a snapshot of byte counts.

    Unknown keys and malformed values are skipped.
    """
    values: dict[str, int] = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        key = parts[0].removesuffix(":")
        if key not in _MEMINFO_KEYS:
            continue
        try:
            val = int(parts[1])
        except ValueError:
            continue
        if val < 0:
            continue
        values[key] = val * 1024
    return MeminfoSnapshot(**values)


def parse_free_output(text: str) -> RamInfo:
    """Pick total and used from the ``Mem:`` row of ``free -b`` output."""
    total = 0
    used = 0
    for i, line in enumerate(text.splitlines()):
        if i == 0:
            continue
        if not line.startswith("Mem:"):
            continue
        fields = line.split()
        if len(fields) >= 3:
            total = _parse_uint(fields[1], total)
            used = _parse_uint(fields[2], used)
        break
    return RamInfo(total=total, used=used, mode=MODE_CALL_FREE)


def _parse_uint(s: str, default: int) -> int:
    try:
        v = int(s)
    except ValueError:
        return default
    return v if v >= 0 else default


def htoplike_from_snapshot(info: MeminfoSnapshot) -> RamInfo:
    used_diff = info.MemFree + info.Cached + info.SReclaimable + info.Buffers
    if info.MemTotal >= used_diff:
        used = info.MemTotal - used_diff
    else:
        used = info.MemTotal - info.MemFree

    # Zswap pool lives in RAM but already counts against swap.
    if info.Zswap > 0 or info.Zswapped > 0:
        if used > info.Zswap:
            used -= info.Zswap
        else:
            used = 0
    return RamInfo(total=info.MemTotal, used=used, mode=MODE_HTOPLIKE)


def swap_from_snapshot(info: MeminfoSnapshot) -> RamInfo:
    deductions = info.SwapFree + info.SwapCached
    if info.SwapTotal >= deductions:
        used = info.SwapTotal - deductions
    else:
        used = info.SwapTotal - info.SwapFree
    return RamInfo(total=info.SwapTotal, used=used)


class MemoryCollector:
    def __init__(
        self,
        config: ProbeConfig | None = None,
        source: MemorySource | None = None,
        runner: CommandRunner | None = None,
        fs: HostFilesystem | None = None,
        system: str | None = None,
    ) -> None:
        self.config = config or ProbeConfig()
        self.source = source or PsutilMemorySource()
        self.runner = runner or SubprocessRunner()
        self.fs = fs or HostFilesystem()
        self.system = (system or platform.system()).lower()

    @property
    def is_linux(self) -> bool:
        return self.system == "linux"

    def read_meminfo(self) -> MeminfoSnapshot:
        """Raises OSError when the pseudo-file cannot be opened."""
        return parse_meminfo(self.fs.read_text(MEMINFO_PATH))

    def _snapshot(self) -> MeminfoSnapshot | None:
        if not self.is_linux:
            return None
        try:
            return self.read_meminfo()
        except OSError as e:
            logger.debug("cannot read %s: %s", MEMINFO_PATH, e)
            return None

    def mem_htoplike(self) -> RamInfo:
        info = self._snapshot()
        if info is None or info.MemTotal <= 0:
            return RamInfo(mode=MODE_HTOPLIKE)
        return htoplike_from_snapshot(info)

    def mem_gopsutil(self) -> RamInfo:
        try:
            v = self.source.virtual_memory()
        except Exception as e:
            logger.debug("virtual memory reading failed: %s", e)
            return RamInfo(mode=MODE_GOPSUTIL)
        return RamInfo(total=v.total, used=v.total - v.available, mode=MODE_GOPSUTIL)

    def call_free(self) -> RamInfo:
        if self.system not in FREE_PLATFORMS:
            return RamInfo(mode=MODE_CALL_FREE)
        try:
            out = self.runner.run(FREE_COMMAND)
        except Exception as e:
            logger.debug("free failed: %s", e)
            return RamInfo(mode=MODE_CALL_FREE)
        return parse_free_output(out)

    def mem_include_cache(self) -> RamInfo:
        try:
            v = self.source.virtual_memory()
        except Exception as e:
            logger.debug("virtual memory reading failed: %s", e)
            return RamInfo(mode=MODE_INCLUDE_CACHE)
        return RamInfo(total=v.total, used=v.total - v.free, mode=MODE_INCLUDE_CACHE)

    def _ram_strategies(self) -> list[Callable[[], RamInfo | None]]:
        return [
            lambda: self.mem_include_cache() if self.config.memory_include_cache else None,
            lambda: self.mem_htoplike() if self.config.memory_report_raw_used else None,
            self._linux_htoplike,
            self.mem_gopsutil,
        ]

    def _linux_htoplike(self) -> RamInfo | None:
        if not self.is_linux:
            return None
        h = self.mem_htoplike()
        return h if h.total > 0 else None

    def resolve_ram(self) -> RamInfo:
        for strategy in self._ram_strategies():
            res = strategy()
            if res is not None:
                return res
        return RamInfo(mode=MODE_GOPSUTIL)

    def resolve_swap(self) -> RamInfo:
        info = self._snapshot()
        if info is not None:
            return swap_from_snapshot(info)

        try:
            s = self.source.swap_memory()
        except Exception as e:
            logger.debug("swap reading failed: %s", e)
            return RamInfo()
        return RamInfo(total=s.total, used=s.used)

    def check(self) -> MemoryCheck:
        """Every accounting model side by side, plus the configured choice."""
        return MemoryCheck(
            snapshot=self._snapshot(),
            models=[self.mem_htoplike(), self.mem_gopsutil(), self.call_free()],
            configured=self.resolve_ram(),
        )
