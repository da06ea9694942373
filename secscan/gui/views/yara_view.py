"""YARA view implementation."""
from __future__ import annotations

from ...security.models import SignatureScan, YaraOptions
from ..widgets.file_picker import FilePicker
from .base import ScanView


class YaraView(ScanView):
    """UI for scanning a file or folder against a YARA rules file."""

    title = "YARA scan"

    def _build_inputs(self) -> None:
        rules_box = self._section("Select the YARA rules file:")
        self._rules_picker = FilePicker(
            self,
            "Select YARA rules file",
            filters=["YARA Rules (*.yar *.yara)"],
            file_button="Choose rules file",
            placeholder="No rules file selected",
        )
        rules_box.layout().addWidget(self._rules_picker)
        self._rules_picker.pathChanged.connect(
            lambda path: self._orchestrator.publish(f"Selected YARA rules file: {path}")
        )

        target_box = self._section("Select the file or folder to scan:")
        self._target_picker = FilePicker(
            self,
            "Select what to scan",
            file_button="Choose file",
            folder_button="Choose folder",
            placeholder="No scan path selected",
        )
        target_box.layout().addWidget(self._target_picker)
        self._target_picker.pathChanged.connect(
            lambda path: self._orchestrator.publish(f"Selected scan path: {path}")
        )

        options_box = self._section("Additional scan options:")
        self._recursive = self._checkbox(options_box, "Recursive scan (-r)")
        self._fast_scan = self._checkbox(options_box, "Fast scan (-f)")
        self._no_warnings = self._checkbox(options_box, "Suppress warnings (-w)")
        self._print_tags = self._checkbox(options_box, "Print tags (-t)")

    def configuration(self) -> SignatureScan:
        return SignatureScan(
            rules_path=self._rules_picker.path,
            target_path=self._target_picker.path,
            options=YaraOptions(
                recursive=self._recursive.isChecked(),
                fast_scan=self._fast_scan.isChecked(),
                no_warnings=self._no_warnings.isChecked(),
                print_tags=self._print_tags.isChecked(),
            ),
        )
