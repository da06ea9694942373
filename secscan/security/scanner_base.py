"""Abstract base class for the external scanners.

Implements the template method pattern: subclasses override
validate(), build_args() and parse_output(), while run() handles the
common subprocess lifecycle.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError, SpawnError
from .models import ErrorKind, Finding, ScanResult
from .tool_manager import ToolManager

logger = logging.getLogger(__name__)


class ScannerBase(ABC):
    """Abstract base for external scanner wrappers.

    Subclasses must implement:
      - tool_name: str property identifying the registered tool
      - validate(configuration) -> raise ConfigurationError on missing input
      - build_args(configuration) -> ordered list of CLI arguments
      - parse_output(scan_result) -> list of normalized Finding objects
    """

    def __init__(
        self,
        tool_manager: ToolManager,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.tool_manager = tool_manager
        self.config = config or {}
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def tool_name(self) -> str:
        """The registered tool name (e.g. 'oscap')."""

    @property
    def display_name(self) -> str:
        try:
            return self.tool_manager.get_tool_info(self.tool_name).display_name
        except KeyError:
            return self.tool_name

    @abstractmethod
    def validate(self, configuration: Any) -> None:
        """Raise ConfigurationError if a required input is missing."""

    @abstractmethod
    def build_args(self, configuration: Any) -> List[str]:
        """Build the argument vector, without the executable."""

    @abstractmethod
    def parse_output(self, scan_result: ScanResult) -> List[Finding]:
        """Parse captured stdout into Finding objects."""

    def resolve_executable(self) -> str:
        """Resolved tool path, or the bare executable name if unresolved.

        An unresolved name is still handed to the OS so that a missing
        binary surfaces as a spawn failure with the OS error text.
        """
        try:
            return str(self.tool_manager.get_tool_path(self.tool_name))
        except (FileNotFoundError, KeyError) as e:
            self.logger.warning(str(e))
            try:
                return self.tool_manager.get_tool_info(self.tool_name).exe_name
            except KeyError:
                return self.tool_name

    def build_command(self, configuration: Any) -> List[str]:
        return [self.resolve_executable(), *self.build_args(configuration)]

    def integrity_failure(self) -> Optional[str]:
        """Reason to refuse the resolved binary, or None.

        Only tools with a configured expected_hash are checked.
        """
        try:
            tool = self.tool_manager.check_tool(self.tool_name)
        except KeyError:
            return None
        if not tool.installed or not tool.expected_hash:
            return None
        if self.tool_manager.verify_tool_integrity(self.tool_name):
            return None
        return f"{self.display_name} at {tool.path} failed its SHA-256 integrity check; not started."

    def configuration_failure(self, reason: str) -> ScanResult:
        """A completed result for a scan that was never started."""
        now = datetime.now()
        return ScanResult(
            tool_name=self.tool_name,
            started_at=now,
            completed_at=now,
            duration_seconds=0.0,
            failure_reason=reason,
            error_kind=ErrorKind.CONFIGURATION,
        )

    async def run(self, configuration: Any) -> ScanResult:
        """Execute the scan. This is the template method.

        1. Validate required inputs
        2. Build command and check the binary against its expected hash
        3. Spawn the process and wait for it to exit (no timeout)
        4. Decode stdout/stderr, replacing invalid bytes
        5. Parse output into findings
        """
        # 1. Validate
        try:
            self.validate(configuration)
        except ConfigurationError as e:
            self.logger.warning(f"{self.display_name} not started: {e}")
            return self.configuration_failure(str(e))

        # 2. Build command
        cmd = self.build_command(configuration)
        result = ScanResult(tool_name=self.tool_name, command=cmd)
        integrity_failure = self.integrity_failure()
        if integrity_failure:
            result.failure_reason = integrity_failure
            result.error_kind = ErrorKind.INTEGRITY
            self.logger.error(integrity_failure)
            self._finish(result)
            return result
        self.logger.info(f"Running {self.display_name}: {' '.join(cmd)}")

        # 3. Execute subprocess
        result.started_at = datetime.now()
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            error = SpawnError(self.display_name, e)
            result.failure_reason = str(error)
            result.error_kind = ErrorKind.SPAWN
            self.logger.error(result.failure_reason)
            self._finish(result)
            return result

        stdout_bytes, stderr_bytes = await process.communicate()

        # 4. Decode
        result.return_code = process.returncode
        result.stdout = stdout_bytes.decode("utf-8", errors="replace")
        result.stderr = stderr_bytes.decode("utf-8", errors="replace")
        self._finish(result)

        # 5. Parse output
        try:
            result.findings = self.parse_output(result)
        except Exception as e:
            self.logger.error(f"Failed to parse {self.display_name} output: {e}", exc_info=True)
            # Raw output is still captured
            result.findings = []

        # Exit codes carry scan verdicts, never orchestration failure
        self.logger.info(
            f"{self.display_name} completed: {result.findings_count} findings, "
            f"exit code {result.return_code}"
        )
        return result

    @staticmethod
    def _finish(result: ScanResult) -> None:
        result.completed_at = datetime.now()
        if result.started_at:
            result.duration_seconds = (
                result.completed_at - result.started_at
            ).total_seconds()
