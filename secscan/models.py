from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .security.downloader import DEFAULT_DEFINITIONS_URL
from .security.models import DEFAULT_REPORT_PATH, DEFAULT_RESULTS_PATH


class ToolOverride(BaseModel):
    path: Optional[str] = None
    expected_hash: Optional[str] = None
    version_args: Optional[List[str]] = None

    model_config = ConfigDict(extra="allow")


class AppConfig(BaseModel):
    name: str = "secscan"
    log_level: str = "INFO"
    logs_dir: str = "./logs"
    tools_dir: str = "./tools"
    download_url: str = DEFAULT_DEFINITIONS_URL
    download_timeout: float = 120.0
    results_path: str = str(DEFAULT_RESULTS_PATH)
    report_path: str = str(DEFAULT_REPORT_PATH)
    poll_interval_ms: int = 200
    tools: Dict[str, ToolOverride] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    @field_validator("tools", mode="before")
    @classmethod
    def _empty_tool_entries(cls, value):
        # "tools:" or "oscap:" with nothing under it parses as None
        if value is None:
            return {}
        if isinstance(value, dict):
            return {name: entry or {} for name, entry in value.items()}
        return value

    def as_runtime_dict(self) -> Dict:
        """Plain dict handed to ToolManager and ScanOrchestrator."""
        return self.model_dump(exclude_none=True)
