from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QAbstractItemView,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from host_probe.models.common import CollectorResult
from host_probe.models.host import HostResourcesData
from host_probe.services.report_service import human_bytes


class DiskPage(QWidget):
    applyRequested = Signal(dict)

    def __init__(self) -> None:
        super().__init__()

        self._total = QLabel("-")
        self._used = QLabel("-")
        self._notes = QLabel("")
        self._notes.setWordWrap(True)
        for lbl in (self._total, self._used):
            lbl.setTextInteractionFlags(Qt.TextSelectableByMouse)

        self._include = QLineEdit("")
        self._include.setPlaceholderText("/;/home;/mnt/data  (empty = auto-detect)")

        apply_btn = QPushButton("Apply & Refresh")
        apply_btn.clicked.connect(self._on_apply_clicked)  # type: ignore[arg-type]

        cfg = QGroupBox("Mountpoints")
        cfg_grid = QGridLayout(cfg)
        cfg_grid.addWidget(QLabel("Include only"), 0, 0)
        cfg_grid.addWidget(self._include, 0, 1)

        cfg_row = QHBoxLayout()
        cfg_row.addWidget(cfg, 1)
        cfg_row.addWidget(apply_btn)

        metrics = QGroupBox("Disk Summary")
        grid = QGridLayout(metrics)
        grid.addWidget(QLabel("Total"), 0, 0)
        grid.addWidget(self._total, 0, 1)
        grid.addWidget(QLabel("Used"), 1, 0)
        grid.addWidget(self._used, 1, 1)
        grid.addWidget(QLabel("Notes"), 2, 0)
        grid.addWidget(self._notes, 2, 1)

        gb = QGroupBox("Counted Mountpoints")
        self._mounts = QTableWidget(0, 1)
        self._mounts.setHorizontalHeaderLabels(["MOUNT (FSTYPE)"])
        self._mounts.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self._mounts.setSelectionBehavior(QAbstractItemView.SelectRows)
        self._mounts.setAlternatingRowColors(True)
        self._mounts.horizontalHeader().setStretchLastSection(True)
        l = QVBoxLayout(gb)
        l.addWidget(self._mounts)

        layout = QVBoxLayout(self)
        layout.addLayout(cfg_row)
        layout.addWidget(metrics)
        layout.addWidget(gb, 1)

    def set_config(self, include_mountpoints: str) -> None:
        self._include.setText(include_mountpoints)

    def _on_apply_clicked(self) -> None:
        self.applyRequested.emit({"include_mountpoints": self._include.text().strip()})

    def set_data(self, result: CollectorResult[HostResourcesData]) -> None:
        d = result.data
        self._total.setText(human_bytes(d.disk.total))
        self._used.setText(f"{human_bytes(d.disk.used)} ({d.disk.used_percent}%)")
        self._notes.setText("\n".join(d.notes) if d.notes else "")

        self._mounts.setRowCount(len(d.mountpoints))
        for r, m in enumerate(d.mountpoints):
            self._mounts.setItem(r, 0, QTableWidgetItem(m))
        self._mounts.resizeColumnsToContents()
