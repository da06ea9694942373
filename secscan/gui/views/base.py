"""Shared layout for the scanner views."""
from __future__ import annotations

from PyQt6.QtGui import QFontDatabase
from PyQt6.QtWidgets import (
    QCheckBox,
    QGroupBox,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ...security.exceptions import ConfigurationError
from ...security.models import RunStatus
from ...security.orchestrator import ScanOrchestrator


class ScanView(QWidget):
    """Numbered sections, a launch button and the output pane.

    Subclasses fill in their input sections and implement configuration().
    """

    title = ""

    def __init__(self, orchestrator: ScanOrchestrator, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._orchestrator = orchestrator
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(16, 16, 16, 16)
        self._layout.setSpacing(12)
        self._sections = 0

        header = QLabel(self.title)
        header.setObjectName("viewTitle")
        self._layout.addWidget(header)

        self._build_inputs()

        run_box = self._section("Run the scan:")
        self._run_button = QPushButton("Start scan")
        self._running_label = QLabel("Scan in progress…")
        self._running_label.setVisible(False)
        run_box.layout().addWidget(self._run_button)
        run_box.layout().addWidget(self._running_label)
        self._run_button.clicked.connect(self._launch)

        output_box = self._section("Output:")
        self._output = QPlainTextEdit()
        self._output.setReadOnly(True)
        self._output.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont))
        self._output.setMinimumHeight(200)
        output_box.layout().addWidget(self._output)

        self._build_footer()
        self._layout.addStretch(1)

    def _build_inputs(self) -> None:
        raise NotImplementedError

    def _build_footer(self) -> None:
        """Optional sections below the output pane."""

    def configuration(self):
        raise NotImplementedError

    def _section(self, caption: str) -> QGroupBox:
        self._sections += 1
        box = QGroupBox(f"{self._sections}. {caption}")
        QVBoxLayout(box)
        self._layout.addWidget(box)
        return box

    @staticmethod
    def _checkbox(box: QGroupBox, label: str) -> QCheckBox:
        checkbox = QCheckBox(label)
        box.layout().addWidget(checkbox)
        return checkbox

    def _launch(self) -> None:
        self._orchestrator.configure(self.configuration())
        try:
            self._orchestrator.launch_scan()
        except ConfigurationError:
            # already shown as the completed status text
            return

    def refresh(self, status: RunStatus) -> None:
        """Mirror the orchestrator status into the widgets."""
        running = status.is_running
        self._run_button.setVisible(not running)
        self._running_label.setVisible(running)
        self._set_actions_enabled(not running)

        text = status.output
        if self._output.toPlainText() != text:
            self._output.setPlainText(text)

    def _set_actions_enabled(self, enabled: bool) -> None:
        """Hook for views with extra buttons that must wait for idle."""

    def shutdown(self) -> None:
        """Release anything a background worker may be waiting on."""
