from __future__ import annotations

from datetime import datetime

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QLabel, QGridLayout, QGroupBox, QHBoxLayout, QWidget

from host_probe.models.common import CollectorResult
from host_probe.models.host import HostResourcesData
from host_probe.services.report_service import human_bytes


class OverviewPage(QWidget):
    def __init__(self) -> None:
        super().__init__()

        self._last_update = QLabel("Last Update: -")
        self._status = QLabel("Status: -")
        self._disk = QLabel("Disk: -")
        self._ram = QLabel("RAM: -")
        self._swap = QLabel("Swap: -")
        self._gpu = QLabel("GPU: -")
        self._warnings = QLabel("Warnings: -")
        self._warnings.setWordWrap(True)

        for lbl in (self._status, self._disk, self._ram, self._swap, self._gpu, self._warnings):
            lbl.setTextInteractionFlags(Qt.TextSelectableByMouse)

        gb = QGroupBox("Overview")
        grid = QGridLayout(gb)
        grid.addWidget(self._last_update, 0, 0, 1, 2)
        grid.addWidget(self._status, 1, 0, 1, 2)
        grid.addWidget(self._disk, 2, 0, 1, 2)
        grid.addWidget(self._ram, 3, 0, 1, 2)
        grid.addWidget(self._swap, 4, 0, 1, 2)
        grid.addWidget(self._gpu, 5, 0, 1, 2)
        grid.addWidget(self._warnings, 6, 0, 1, 2)

        root = QHBoxLayout(self)
        root.addWidget(gb)
        root.addStretch(1)

    def set_data(self, result: CollectorResult[HostResourcesData]) -> None:
        d = result.data
        ts = result.ts.strftime("%F %T") if isinstance(result.ts, datetime) else str(result.ts)
        self._last_update.setText(f"Last Update: {ts}")
        self._status.setText(f"Status: {result.status}")
        self._disk.setText(
            f"Disk: {human_bytes(d.disk.used)} / {human_bytes(d.disk.total)} ({d.disk.used_percent}%)"
        )
        self._ram.setText(
            f"RAM: {human_bytes(d.ram.used)} / {human_bytes(d.ram.total)} ({d.ram.used_percent}%) [{d.ram.mode}]"
        )
        self._swap.setText(f"Swap: {human_bytes(d.swap.used)} / {human_bytes(d.swap.total)}")
        self._gpu.setText(f"GPU: {d.gpu}")
        if result.warnings:
            self._warnings.setText("Warnings:\n" + "\n".join(result.warnings))
        else:
            self._warnings.setText(f"Warnings: {result.warning_count}")
