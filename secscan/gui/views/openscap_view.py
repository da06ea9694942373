"""OpenSCAP view: definitions download, OVAL evaluation, report actions."""
from __future__ import annotations

from pathlib import Path

from PyQt6.QtCore import QUrl
from PyQt6.QtGui import QDesktopServices
from PyQt6.QtWidgets import QFileDialog, QHBoxLayout, QLabel, QPushButton

from ...security.models import ComplianceScan, OpenScapOptions, RunStatus
from ..threading import MainThreadPrompt
from ..widgets.file_picker import FilePicker
from .base import ScanView


def _open_with_desktop(uri: str) -> bool:
    return QDesktopServices.openUrl(QUrl(uri))


class OpenScapView(ScanView):
    """UI for evaluating OVAL definitions with oscap."""

    title = "OpenSCAP scan"

    def _build_inputs(self) -> None:
        self._save_prompt = MainThreadPrompt(self._ask_definitions_destination, self)

        download_box = self._section("Download the vulnerability definitions:")
        row = QHBoxLayout()
        self._download_button = QPushButton("Download XML")
        self._download_label = QLabel("File not downloaded")
        row.addWidget(self._download_button)
        row.addWidget(self._download_label, 1)
        download_box.layout().addLayout(row)
        self._download_button.clicked.connect(self._download)

        content_box = self._section("Select the XML file to scan:")
        self._content_picker = FilePicker(
            self,
            "Select XML file to scan",
            filters=["SCAP Content (*.xml)"],
            file_button="Choose XML to scan",
        )
        content_box.layout().addWidget(self._content_picker)
        self._content_picker.pathChanged.connect(
            lambda path: self._orchestrator.publish(f"Selected XML file: {path}")
        )

        options_box = self._section("Additional scan options:")
        self._skip_valid = self._checkbox(options_box, "Skip validation (--skip-valid)")
        self._verbose = self._checkbox(options_box, "Verbose output (--verbose)")
        self._oval_results = self._checkbox(options_box, "Save OVAL results (--oval-results)")
        self._dont_send = self._checkbox(options_box, "Do not send results (--dont-send-results)")

    def _build_footer(self) -> None:
        report_box = self._section("Review the results:")
        row = QHBoxLayout()
        self._open_report_button = QPushButton("Open HTML report")
        self._copy_report_button = QPushButton("Save report as…")
        row.addWidget(self._open_report_button)
        row.addWidget(self._copy_report_button)
        row.addStretch(1)
        report_box.layout().addLayout(row)
        self._open_report_button.clicked.connect(
            lambda: self._orchestrator.open_report(opener=_open_with_desktop)
        )
        self._copy_report_button.clicked.connect(self._copy_report)

    def configuration(self) -> ComplianceScan:
        return self._orchestrator.compliance_configuration.model_copy(
            update={
                "content_path": self._content_picker.path,
                "options": OpenScapOptions(
                    skip_valid=self._skip_valid.isChecked(),
                    verbose=self._verbose.isChecked(),
                    oval_results=self._oval_results.isChecked(),
                    dont_send_results=self._dont_send.isChecked(),
                ),
            }
        )

    def _download(self) -> None:
        self._orchestrator.launch_download(self._save_prompt)

    def _ask_definitions_destination(self) -> Path | None:
        path, _ = QFileDialog.getSaveFileName(self, "Save XML file as", filter="XML (*.xml)")
        return Path(path) if path else None

    def _copy_report(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Save report as", filter="HTML (*.html *.htm)")
        self._orchestrator.copy_report(Path(path) if path else None)

    def refresh(self, status: RunStatus) -> None:
        super().refresh(status)
        saved = self._orchestrator.last_download_path
        self._download_label.setText(f"Saved as: {saved}" if saved else "File not downloaded")

    def shutdown(self) -> None:
        self._save_prompt.close()

    def _set_actions_enabled(self, enabled: bool) -> None:
        self._download_button.setEnabled(enabled)
        self._open_report_button.setEnabled(enabled)
        self._copy_report_button.setEnabled(enabled)
