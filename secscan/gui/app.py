"""Entry point for the desktop interface."""
from __future__ import annotations

import sys

from PyQt6.QtWidgets import QApplication

from ..models import AppConfig
from ..security.orchestrator import ScanOrchestrator
from .main_window import MainWindow


def run_gui(config: AppConfig, argv: list[str] | None = None) -> int:
    app = QApplication(argv if argv is not None else sys.argv)
    app.setApplicationName("Security Scanner GUI")
    orchestrator = ScanOrchestrator(config=config.as_runtime_dict())
    window = MainWindow(orchestrator, poll_interval_ms=config.poll_interval_ms)
    window.show()
    return app.exec()
