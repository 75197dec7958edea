from __future__ import annotations

from dataclasses import replace
from typing import Any

from PySide6.QtCore import QThreadPool
from PySide6.QtWidgets import (
    QMainWindow,
    QPushButton,
    QSplitter,
    QStackedWidget,
    QTreeWidget,
    QTreeWidgetItem,
)

from host_probe.collectors.host_collector import HostResourceCollector
from host_probe.gui.pages.disk_page import DiskPage
from host_probe.gui.pages.memory_page import MemoryPage
from host_probe.gui.pages.overview_page import OverviewPage
from host_probe.gui.workers import Worker, WorkerJob
from host_probe.models.common import CollectorResult
from host_probe.models.host import HostResourcesData
from host_probe.services.config_service import ConfigService, ProbeConfig
from host_probe.services.report_service import ReportService


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Host Probe")
        self.resize(960, 680)

        self._config = ConfigService()
        self._reporter = ReportService()
        self._probe_config = self._config.load_probe_config()
        self._collector = HostResourceCollector(config=self._probe_config)
        self._latest: CollectorResult[HostResourcesData] | None = None

        self._thread_pool = QThreadPool.globalInstance()
        self._req_id = 0
        self._active_workers: set[Worker] = set()

        self._nav = QTreeWidget()
        self._nav.setHeaderHidden(True)

        self._pages = QStackedWidget()
        self._overview = OverviewPage()
        self._disks = DiskPage()
        self._memory = MemoryPage()

        self._pages.addWidget(self._overview)
        self._pages.addWidget(self._disks)
        self._pages.addWidget(self._memory)

        self._nav_items: dict[str, int] = {
            "Overview": 0,
            "Disks": 1,
            "Memory": 2,
        }
        for title in self._nav_items.keys():
            self._nav.addTopLevelItem(QTreeWidgetItem([title]))
        self._nav.setCurrentItem(self._nav.topLevelItem(0))

        splitter = QSplitter()
        splitter.addWidget(self._nav)
        splitter.addWidget(self._pages)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        self.statusBar().showMessage("Ready")

        refresh_btn = QPushButton("Refresh")
        refresh_btn.clicked.connect(self.refresh)  # type: ignore[arg-type]
        self.statusBar().addPermanentWidget(refresh_btn)

        export_btn = QPushButton("Export Report")
        export_btn.clicked.connect(self._export_report)  # type: ignore[arg-type]
        self.statusBar().addPermanentWidget(export_btn)

        self._nav.currentItemChanged.connect(self._on_nav_changed)  # type: ignore[arg-type]
        self._disks.applyRequested.connect(self._on_apply)  # type: ignore[arg-type]
        self._memory.applyRequested.connect(self._on_apply)  # type: ignore[arg-type]

        self._disks.set_config(self._probe_config.include_mountpoints)
        self._memory.set_config(
            self._probe_config.memory_include_cache,
            self._probe_config.memory_report_raw_used,
        )

        self.refresh()

    def _on_apply(self, cfg: dict) -> None:
        self._probe_config = replace(self._probe_config, **cfg)
        self._collector = HostResourceCollector(config=self._probe_config)
        self._config.save_probe_config(self._probe_config)
        self.statusBar().showMessage(
            f"Config applied: include={self._probe_config.include_mountpoints or '(auto)'} "
            f"include_cache={self._probe_config.memory_include_cache} "
            f"raw_used={self._probe_config.memory_report_raw_used}"
        )
        self.refresh()

    def _on_nav_changed(self, current: QTreeWidgetItem | None, _prev: QTreeWidgetItem | None) -> None:
        if current is None:
            return
        title = current.text(0)
        idx = self._nav_items.get(title)
        if idx is not None:
            self._pages.setCurrentIndex(idx)

    def refresh(self) -> None:
        self._req_id += 1
        req_id = self._req_id
        collector = self._collector

        def job() -> CollectorResult[HostResourcesData]:
            return collector.collect()

        w = Worker(WorkerJob(fn=job, name="host collect"))
        self._active_workers.add(w)
        w.signals.result.connect(lambda r, _w=w: self._on_result(req_id, r))  # type: ignore[arg-type]
        w.signals.error.connect(lambda m, _w=w: self._on_worker_error(m))  # type: ignore[arg-type]
        w.signals.finished.connect(lambda _w=w: self._active_workers.discard(_w))  # type: ignore[arg-type]
        self._thread_pool.start(w)
        self.statusBar().showMessage("Collecting...")

    def _on_result(self, req_id: int, res: Any) -> None:
        if req_id != self._req_id:
            return
        if not isinstance(res, CollectorResult):
            return

        try:
            host_res: CollectorResult[HostResourcesData] = res
            self._latest = host_res
            self._overview.set_data(host_res)
            self._disks.set_data(host_res)
            self._memory.set_data(host_res)

            self.statusBar().showMessage(
                f"Updated: {host_res.ts.strftime('%F %T')} | Status: {host_res.status} | Warnings: {host_res.warning_count}"
            )
        except Exception as e:  # noqa: BLE001
            self._on_worker_error(str(e))

    def _export_report(self) -> None:
        try:
            bundle = self._reporter.build_report(host=self._latest)
            out = self._reporter.default_report_path()
            written = self._reporter.write_html(out, bundle.html)
            self.statusBar().showMessage(f"Report exported: {written}")
        except Exception as e:  # noqa: BLE001
            self._on_worker_error(str(e))

    def _on_worker_error(self, msg: str) -> None:
        self.statusBar().showMessage(f"Error: {msg}")
