"""Scan orchestration subsystem for secscan.

Drives the external OpenSCAP and YARA command-line scanners, downloads
OVAL definitions and handles the generated report.
"""

from .models import (
    ComplianceScan,
    DownloadOutcome,
    DownloadOutcomeKind,
    ErrorKind,
    Finding,
    OpenScapOptions,
    RunState,
    RunStatus,
    ScanConfiguration,
    ScanResult,
    SeverityLevel,
    SignatureScan,
    ToolInfo,
    YaraOptions,
)
from .exceptions import (
    ConfigurationError,
    DecodeError,
    DownloadError,
    NetworkError,
    SecScanError,
    SpawnError,
)
from .tool_manager import ToolManager
from .scanner_base import ScannerBase
from .downloader import DEFAULT_DEFINITIONS_URL, DefinitionsDownloader
from .orchestrator import ScanOrchestrator

__all__ = [
    "ComplianceScan",
    "DownloadOutcome",
    "DownloadOutcomeKind",
    "ErrorKind",
    "Finding",
    "OpenScapOptions",
    "RunState",
    "RunStatus",
    "ScanConfiguration",
    "ScanResult",
    "SeverityLevel",
    "SignatureScan",
    "ToolInfo",
    "YaraOptions",
    "ConfigurationError",
    "DecodeError",
    "DownloadError",
    "NetworkError",
    "SecScanError",
    "SpawnError",
    "ToolManager",
    "ScannerBase",
    "DEFAULT_DEFINITIONS_URL",
    "DefinitionsDownloader",
    "ScanOrchestrator",
]
