"""Main window implementation for the scanner front-end."""
from __future__ import annotations

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QScrollArea,
    QStackedWidget,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from ..security.orchestrator import ScanOrchestrator
from .views.base import ScanView
from .views.openscap_view import OpenScapView
from .views.yara_view import YaraView

TOOLS = ["OpenSCAP", "YARA"]


class MainWindow(QMainWindow):
    """Tool selector on top, one view per scanner below."""

    def __init__(
        self,
        orchestrator: ScanOrchestrator,
        poll_interval_ms: int = 200,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Security Scanner GUI")
        self.resize(900, 900)
        self._orchestrator = orchestrator

        container = QWidget()
        layout = QVBoxLayout(container)

        heading = QLabel("Security Scanner GUI")
        heading.setObjectName("appTitle")
        layout.addWidget(heading)

        selector_row = QHBoxLayout()
        selector_row.addWidget(QLabel("Select a tool:"))
        self._tool_combo = QComboBox()
        self._tool_combo.addItems(TOOLS)
        selector_row.addWidget(self._tool_combo)
        selector_row.addStretch(1)
        layout.addLayout(selector_row)

        self._views: list[ScanView] = [OpenScapView(orchestrator), YaraView(orchestrator)]
        self._stack = QStackedWidget()
        for view in self._views:
            scroll = QScrollArea()
            scroll.setWidgetResizable(True)
            scroll.setWidget(view)
            self._stack.addWidget(scroll)
        layout.addWidget(self._stack, 1)

        self.setCentralWidget(container)
        self.setStatusBar(QStatusBar())

        self._tool_combo.currentIndexChanged.connect(self._stack.setCurrentIndex)

        self._timer = QTimer(self)
        self._timer.setInterval(poll_interval_ms)
        self._timer.timeout.connect(self._poll_status)
        self._timer.start()
        self._poll_status()

    def _poll_status(self) -> None:
        status = self._orchestrator.current_status()
        self._views[self._stack.currentIndex()].refresh(status)
        self.statusBar().showMessage("Running…" if status.is_running else "Ready")

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._timer.stop()
        for view in self._views:
            view.shutdown()
        # A running scan cannot be cancelled; do not block the window on it
        self._orchestrator.shutdown(wait=False)
        super().closeEvent(event)
