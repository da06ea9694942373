"""OpenSCAP scanner: OVAL evaluation of a vulnerability definitions file.

Writes a machine-readable results file and an HTML report at caller
supplied paths. oscap exits with 2 when a definition evaluates to true;
that is a finding, not an error.
"""

import logging
from typing import Any, Dict, List, Optional

from ..exceptions import ConfigurationError
from ..models import ComplianceScan, Finding, ScanResult, SeverityLevel
from ..result_parser import ResultParser
from ..scanner_base import ScannerBase
from ..tool_manager import ToolManager

logger = logging.getLogger(__name__)


class OpenScapScanner(ScannerBase):
    """OpenSCAP ``oscap oval eval`` wrapper."""

    @property
    def tool_name(self) -> str:
        return "oscap"

    def __init__(
        self,
        tool_manager: ToolManager,
        config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(tool_manager, config)
        self.report_true_only = self.config.get("report_true_only", True)

    def validate(self, configuration: Any) -> None:
        if not isinstance(configuration, ComplianceScan):
            raise ConfigurationError("OpenSCAP requires a compliance scan configuration.")
        if configuration.content_path is None:
            raise ConfigurationError("No XML file selected for scanning.")

    def build_args(self, configuration: ComplianceScan) -> List[str]:
        options = configuration.options
        args = [
            "oval",
            "eval",
            "--results",
            str(configuration.results_path),
            "--report",
            str(configuration.report_path),
        ]

        if options.skip_valid:
            args.append("--skip-valid")
        if options.verbose:
            args.append("--verbose")
        if options.oval_results:
            args.append("--oval-results")
        if options.dont_send_results:
            args.append("--dont-send-results")

        args.append(str(configuration.content_path))
        return args

    def parse_output(self, scan_result: ScanResult) -> List[Finding]:
        """Report definitions that evaluated to true (system is affected)."""
        findings: List[Finding] = []
        for entry in ResultParser.parse_oval_results(scan_result.stdout):
            if self.report_true_only and entry["result"] != "true":
                continue
            findings.append(
                Finding(
                    tool_name=self.tool_name,
                    severity=SeverityLevel.HIGH if entry["result"] == "true" else SeverityLevel.INFO,
                    category="vulnerability_definition",
                    title=f"OVAL: {entry['definition']}",
                    description=(
                        f"Definition {entry['definition']} evaluated to {entry['result']}"
                    ),
                    target=entry["definition"],
                    raw_data=entry,
                )
            )
        return findings
