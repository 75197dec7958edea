import faulthandler
import logging
import os
import sys

from PySide6.QtWidgets import QApplication

from host_probe.gui.main_window import MainWindow


def run() -> None:
    faulthandler.enable()
    logging.basicConfig(
        level=os.environ.get("HOST_PROBE_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    app.setApplicationName("Host Probe")

    w = MainWindow()
    w.show()

    raise SystemExit(app.exec())
