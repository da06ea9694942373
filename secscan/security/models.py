"""Pydantic v2 models for the scan orchestration subsystem."""

import tempfile
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path, PurePath
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_RESULTS_PATH = Path(tempfile.gettempdir()) / "results.xml"
DEFAULT_REPORT_PATH = Path(tempfile.gettempdir()) / "report.html"


def _unset_if_blank(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    # Path("") normalises to "."; a typed "." must arrive as a string
    if isinstance(value, PurePath) and str(value).strip() in ("", "."):
        return None
    return value


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    SPAWN = "spawn"
    INTEGRITY = "integrity"


class SeverityLevel(str, Enum):
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class DownloadOutcomeKind(str, Enum):
    SAVED = "saved"
    CANCELLED = "cancelled"
    NETWORK_ERROR = "network_error"
    DECODE_ERROR = "decode_error"
    IO_ERROR = "io_error"


class ToolInfo(BaseModel):
    """Metadata and resolved location for an external scanner executable."""

    name: str
    display_name: str
    exe_name: str
    version: Optional[str] = None
    version_args: List[str] = Field(default_factory=lambda: ["--version"])
    path: Optional[Path] = None
    expected_hash: Optional[str] = None
    installed: bool = False
    homepage: str = ""
    license: str = ""

    model_config = ConfigDict(extra="allow")


class OpenScapOptions(BaseModel):
    """Optional OpenSCAP switches, appended in declaration order."""

    skip_valid: bool = False
    verbose: bool = False
    oval_results: bool = False
    dont_send_results: bool = False


class YaraOptions(BaseModel):
    """Optional YARA switches, appended in declaration order."""

    recursive: bool = False
    fast_scan: bool = False
    no_warnings: bool = False
    print_tags: bool = False


class ComplianceScan(BaseModel):
    """OVAL evaluation of an XML definitions document with ``oscap``."""

    kind: Literal["compliance"] = "compliance"
    content_path: Optional[Path] = None
    results_path: Path = DEFAULT_RESULTS_PATH
    report_path: Path = DEFAULT_REPORT_PATH
    options: OpenScapOptions = Field(default_factory=OpenScapOptions)

    @field_validator("content_path", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        return _unset_if_blank(value)


class SignatureScan(BaseModel):
    """Rule-based scan of a file or folder with ``yara``."""

    kind: Literal["signature"] = "signature"
    rules_path: Optional[Path] = None
    target_path: Optional[Path] = None
    options: YaraOptions = Field(default_factory=YaraOptions)

    @field_validator("rules_path", "target_path", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        return _unset_if_blank(value)


ScanConfiguration = Annotated[
    Union[ComplianceScan, SignatureScan], Field(discriminator="kind")
]


class Finding(BaseModel):
    """A single match or failed definition parsed from tool output."""

    finding_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    tool_name: str
    severity: SeverityLevel
    category: str
    title: str
    description: str
    target: str
    raw_data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)


class ScanResult(BaseModel):
    """Captured output of one scan, or the reason it never ran."""

    scan_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    tool_name: str
    command: List[str] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    return_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    findings: List[Finding] = Field(default_factory=list)
    failure_reason: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def findings_count(self) -> int:
        return len(self.findings)

    @property
    def failed_to_run(self) -> bool:
        return self.failure_reason is not None

    def as_text(self) -> str:
        if self.failure_reason is not None:
            return self.failure_reason
        return f"STDOUT:\n{self.stdout}\nSTDERR:\n{self.stderr}"


class RunStatus(BaseModel):
    """Snapshot of the orchestrator's shared status.

    Instances are frozen; every transition publishes a new object.
    """

    model_config = ConfigDict(frozen=True)

    state: RunState = RunState.IDLE
    message: str = ""
    result: Optional[ScanResult] = None
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_running(self) -> bool:
        return self.state == RunState.RUNNING

    @property
    def output(self) -> str:
        if self.result is not None:
            return self.result.as_text()
        return self.message


class DownloadOutcome(BaseModel):
    """Terminal outcome of a definitions download."""

    kind: DownloadOutcomeKind
    message: str
    path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.kind == DownloadOutcomeKind.SAVED
