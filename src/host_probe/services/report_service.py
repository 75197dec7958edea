from __future__ import annotations

import html
import os
from dataclasses import dataclass, fields
from datetime import datetime
from pathlib import Path

from host_probe.models.common import CollectorResult
from host_probe.models.host import HostResourcesData
from host_probe.models.memory import RamInfo

_MIB = 1024 * 1024


@dataclass(frozen=True)
class ReportBundle:
    text: str
    html: str


def human_bytes(n: int) -> str:
    v = float(n)
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if v < 1024.0:
            return f"{v:.1f}{unit}" if unit != "B" else f"{int(v)}B"
        v /= 1024.0
    return f"{v:.1f}PB"


def format_ram(info: RamInfo) -> str:
    tag = f"[{info.mode}] " if info.mode else ""
    return (
        f"{tag}Total: {info.total} bytes ({info.total // _MIB} MiB), "
        f"Used: {info.used} bytes ({info.used // _MIB} MiB)"
    )


class ReportService:
    def build_report(self, *, host: CollectorResult[HostResourcesData] | None) -> ReportBundle:
        now = datetime.now().strftime("%F %T")

        lines: list[str] = [f"Host Probe Report @ {now}", ""]
        if host is None:
            lines.append("- no data\n")
        else:
            lines.append(self._section_summary(host))
            lines.append(self._section_disk(host.data))
            lines.append(self._section_memory(host.data))
            lines.append(self._section_gpu(host.data))
        text_out = "\n".join(lines).strip() + "\n"

        html_out = self._wrap_html(text_out)
        return ReportBundle(text=text_out, html=html_out)

    def default_report_path(self) -> Path:
        base = Path.home() / "host_probe_reports"
        base.mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d-%H%M%S")
        return base / f"host_report_{ts}.html"

    def write_html(self, path: str | os.PathLike[str], html_str: str) -> str:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(html_str, encoding="utf-8")
        return str(p)

    def _section_summary(self, r: CollectorResult[HostResourcesData]) -> str:
        out = (
            "[Summary]\n"
            f"- ts: {r.ts:%F %T}\n"
            f"- status: {r.status} (warnings={r.warning_count})\n"
        )
        for w in r.warnings:
            out += f"  - {w}\n"
        for n in r.data.notes:
            out += f"- note: {n}\n"
        return out

    def _section_disk(self, d: HostResourcesData) -> str:
        mounts = "\n".join(f"  - {m}" for m in d.mountpoints) or "  - (none)"
        return (
            "[Disk]\n"
            f"- total: {human_bytes(d.disk.total)}\n"
            f"- used: {human_bytes(d.disk.used)} ({d.disk.used_percent}%)\n"
            f"- counted:\n{mounts}\n"
        )

    def _section_memory(self, d: HostResourcesData) -> str:
        out = "[Memory]\n" f"- ram: {format_ram(d.ram)}\n" f"- swap: {format_ram(d.swap)}\n"
        snap = d.memory_check.snapshot
        if snap is not None:
            out += "- meminfo:\n"
            for f in fields(snap):
                out += f"  - {f.name}: {getattr(snap, f.name) // _MIB} MiB\n"
        out += "- models:\n"
        for m in d.memory_check.models:
            out += f"  - {format_ram(m)}\n"
        return out

    def _section_gpu(self, d: HostResourcesData) -> str:
        return "[GPU]\n" f"- name: {d.gpu}\n"

    def _wrap_html(self, text_out: str) -> str:
        escaped = html.escape(text_out)
        return (
            "<!doctype html>"
            "<html><head><meta charset='utf-8'>"
            "<meta name='viewport' content='width=device-width, initial-scale=1'>"
            "<title>Host Probe Report</title>"
            "<style>body{font-family:ui-monospace,Menlo,Consolas,monospace;margin:24px;}"
            "pre{white-space:pre-wrap;line-height:1.35;}"
            "</style></head><body>"
            "<h1>Host Probe Report</h1>"
            f"<pre>{escaped}</pre>"
            "</body></html>"
        )
