from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ConfigPaths:
    path: Path


@dataclass(frozen=True)
class ProbeConfig:
    include_mountpoints: str = ""
    memory_include_cache: bool = False
    memory_report_raw_used: bool = False
    disk_warn_percent: int = 85
    mem_warn_percent: int = 85

    @classmethod
    def from_dict(cls, obj: dict[str, Any]) -> ProbeConfig:
        defaults = cls()
        return cls(
            include_mountpoints=str(obj.get("include_mountpoints") or ""),
            memory_include_cache=_as_bool(obj.get("memory_include_cache"), defaults.memory_include_cache),
            memory_report_raw_used=_as_bool(obj.get("memory_report_raw_used"), defaults.memory_report_raw_used),
            disk_warn_percent=_as_int(obj.get("disk_warn_percent"), defaults.disk_warn_percent),
            mem_warn_percent=_as_int(obj.get("mem_warn_percent"), defaults.mem_warn_percent),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def mountpoint_allow_list(self) -> list[str]:
        return [m.strip() for m in self.include_mountpoints.split(";") if m.strip()]


def _as_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"):
            return True
        if s in ("0", "false", "no", "off"):
            return False
    return default


def _as_int(v: Any, default: int) -> int:
    if isinstance(v, bool):
        return default
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


class ConfigService:
    def __init__(self, paths: ConfigPaths | None = None) -> None:
        self.paths = paths or ConfigPaths(path=self.default_path())

    @staticmethod
    def default_path() -> Path:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        if xdg:
            base = Path(xdg)
        else:
            base = Path.home() / ".config"
        return base / "host_probe" / "config.json"

    def load(self) -> dict[str, Any]:
        p = self.paths.path
        if not p.exists():
            return {}
        try:
            with open(p, "r", encoding="utf-8") as f:
                obj = json.load(f)
            return obj if isinstance(obj, dict) else {}
        except (OSError, ValueError):
            return {}

    def load_probe_config(self) -> ProbeConfig:
        return ProbeConfig.from_dict(self.load())

    def save(self, cfg: dict[str, Any]) -> None:
        p = self.paths.path
        p.parent.mkdir(parents=True, exist_ok=True)
        tmp = p.with_suffix(p.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(cfg, f, ensure_ascii=False, indent=2, sort_keys=True)
        tmp.replace(p)

    def save_probe_config(self, cfg: ProbeConfig) -> None:
        self.save(cfg.to_dict())
