"""YARA scanner: pattern-based malware detection.

Scans a file or folder against a single rules file.
"""

import logging
from typing import Any, List

from ..exceptions import ConfigurationError
from ..models import Finding, ScanResult, SeverityLevel, SignatureScan
from ..result_parser import ResultParser
from ..scanner_base import ScannerBase

logger = logging.getLogger(__name__)


class YaraScanner(ScannerBase):
    """YARA command-line scanner."""

    @property
    def tool_name(self) -> str:
        return "yara"

    def validate(self, configuration: Any) -> None:
        if not isinstance(configuration, SignatureScan):
            raise ConfigurationError("YARA requires a signature scan configuration.")
        if configuration.rules_path is None:
            raise ConfigurationError("No YARA rules file selected.")
        if configuration.target_path is None:
            raise ConfigurationError("No path selected for scanning.")

    def build_args(self, configuration: SignatureScan) -> List[str]:
        options = configuration.options
        args: List[str] = []

        if options.recursive:
            args.append("-r")
        if options.fast_scan:
            args.append("-f")
        if options.no_warnings:
            args.append("-w")
        if options.print_tags:
            args.append("-t")

        args.append(str(configuration.rules_path))
        args.append(str(configuration.target_path))
        return args

    def parse_output(self, scan_result: ScanResult) -> List[Finding]:
        findings: List[Finding] = []
        for match in ResultParser.parse_yara_matches(scan_result.stdout):
            rule_name = match["rule"]
            target = match["target"]
            tags = match["tags"]
            description = f"YARA rule '{rule_name}' matched in {target}"
            if tags:
                description += f" (tags: {', '.join(tags)})"
            findings.append(
                Finding(
                    tool_name=self.tool_name,
                    severity=SeverityLevel.HIGH,
                    category="suspicious_pattern",
                    title=f"YARA: {rule_name}",
                    description=description,
                    target=target,
                    raw_data=match,
                )
            )
        return findings
