from __future__ import annotations

from dataclasses import fields

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from host_probe.models.common import CollectorResult
from host_probe.models.host import HostResourcesData
from host_probe.models.memory import RamInfo

_MIB = 1024 * 1024


class MemoryPage(QWidget):
    applyRequested = Signal(dict)

    def __init__(self) -> None:
        super().__init__()

        self._configured = QLabel("-")
        self._swap = QLabel("-")
        for lbl in (self._configured, self._swap):
            lbl.setTextInteractionFlags(Qt.TextSelectableByMouse)

        self._include_cache = QCheckBox("Count cache/buffers as used")
        self._raw_used = QCheckBox("Report raw used (htop-like)")

        apply_btn = QPushButton("Apply & Refresh")
        apply_btn.clicked.connect(self._on_apply_clicked)  # type: ignore[arg-type]

        cfg = QGroupBox("Accounting")
        cfg_l = QVBoxLayout(cfg)
        cfg_l.addWidget(self._include_cache)
        cfg_l.addWidget(self._raw_used)

        cfg_row = QHBoxLayout()
        cfg_row.addWidget(cfg, 1)
        cfg_row.addWidget(apply_btn)

        current = QGroupBox("Current")
        grid = QGridLayout(current)
        grid.addWidget(QLabel("RAM"), 0, 0)
        grid.addWidget(self._configured, 0, 1)
        grid.addWidget(QLabel("Swap"), 1, 0)
        grid.addWidget(self._swap, 1, 1)

        self._models = self._make_table("Accounting Models", ["MODE", "TOTAL(MiB)", "USED(MiB)", "USED%"])
        self._meminfo = self._make_table("/proc/meminfo", ["KEY", "MiB"])

        layout = QVBoxLayout(self)
        layout.addLayout(cfg_row)
        layout.addWidget(current)
        layout.addWidget(self._models[0], 1)
        layout.addWidget(self._meminfo[0], 2)

    def _make_table(self, title: str, headers: list[str]) -> tuple[QGroupBox, QTableWidget]:
        gb = QGroupBox(title)
        t = QTableWidget(0, len(headers))
        t.setHorizontalHeaderLabels(headers)
        t.setEditTriggers(QAbstractItemView.NoEditTriggers)
        t.setSelectionBehavior(QAbstractItemView.SelectRows)
        t.setAlternatingRowColors(True)
        t.horizontalHeader().setStretchLastSection(True)
        t.verticalHeader().setVisible(False)
        l = QVBoxLayout(gb)
        l.addWidget(t)
        return gb, t

    def set_config(self, include_cache: bool, raw_used: bool) -> None:
        self._include_cache.setChecked(include_cache)
        self._raw_used.setChecked(raw_used)

    def _on_apply_clicked(self) -> None:
        cfg = {
            "memory_include_cache": self._include_cache.isChecked(),
            "memory_report_raw_used": self._raw_used.isChecked(),
        }
        self.applyRequested.emit(cfg)

    def set_data(self, result: CollectorResult[HostResourcesData]) -> None:
        d = result.data
        self._configured.setText(self._fmt(d.ram))
        self._swap.setText(self._fmt(d.swap))

        t = self._models[1]
        models = list(d.memory_check.models)
        t.setRowCount(len(models))
        for r, m in enumerate(models):
            t.setItem(r, 0, QTableWidgetItem(m.mode))
            t.setItem(r, 1, QTableWidgetItem(str(m.total // _MIB)))
            t.setItem(r, 2, QTableWidgetItem(str(m.used // _MIB)))
            t.setItem(r, 3, QTableWidgetItem(str(m.used_percent)))
        t.resizeColumnsToContents()

        t = self._meminfo[1]
        snap = d.memory_check.snapshot
        if snap is None:
            t.setRowCount(0)
            return
        keys = fields(snap)
        t.setRowCount(len(keys))
        for r, f in enumerate(keys):
            t.setItem(r, 0, QTableWidgetItem(f.name))
            t.setItem(r, 1, QTableWidgetItem(str(getattr(snap, f.name) // _MIB)))
        t.resizeColumnsToContents()

    @staticmethod
    def _fmt(info: RamInfo) -> str:
        mode = f" [{info.mode}]" if info.mode else ""
        return f"{info.used // _MIB}/{info.total // _MIB} MiB ({info.used_percent}%){mode}"
