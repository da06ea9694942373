from .config import ConfigManager
from .models import AppConfig
from .security.orchestrator import ScanOrchestrator
from .security.models import (
    ComplianceScan, SignatureScan, OpenScapOptions, YaraOptions,
    RunState, RunStatus, ScanResult
)

__version__ = "0.1.0"
__all__ = [
    "ConfigManager",
    "AppConfig",
    "ScanOrchestrator",
    "ComplianceScan",
    "SignatureScan",
    "OpenScapOptions",
    "YaraOptions",
    "RunState",
    "RunStatus",
    "ScanResult"
]
