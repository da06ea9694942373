"""Tests for the ScannerBase subprocess lifecycle using mock scanners."""

import hashlib
import sys
import pytest
from pathlib import Path
from typing import Any, List

from secscan.security.exceptions import ConfigurationError
from secscan.security.models import (
    ErrorKind,
    Finding,
    ScanResult,
    SeverityLevel,
    SignatureScan,
)
from secscan.security.scanner_base import ScannerBase
from secscan.security.tool_manager import ToolManager


class ScriptScanner(ScannerBase):
    """Runs a Python snippet instead of a real scanner binary."""

    script = "print('mock scan output')"

    @property
    def tool_name(self) -> str:
        return "yara"

    def validate(self, configuration: Any) -> None:
        if configuration.rules_path is None:
            raise ConfigurationError("No YARA rules file selected.")

    def build_args(self, configuration: Any) -> List[str]:
        return [str(configuration.rules_path), str(configuration.target_path)]

    def build_command(self, configuration: Any) -> List[str]:
        return [sys.executable, "-c", self.script]

    def parse_output(self, scan_result: ScanResult) -> List[Finding]:
        if "mock scan output" in scan_result.stdout:
            return [
                Finding(
                    tool_name="yara",
                    severity=SeverityLevel.INFO,
                    category="test",
                    title="Mock finding",
                    description="Found during mock scan",
                    target="test_target",
                )
            ]
        return []


class NonZeroExitScanner(ScriptScanner):
    script = (
        "import sys; print('Rule_X /tmp/sample'); "
        "sys.stderr.write('warning: slow rule\\n'); sys.exit(3)"
    )


class InvalidBytesScanner(ScriptScanner):
    script = "import sys; sys.stdout.buffer.write(b'ok \\xff\\xfe done'); sys.stderr.buffer.write(b'\\xc3')"


class ParseErrorScanner(ScriptScanner):
    def parse_output(self, scan_result: ScanResult) -> List[Finding]:
        raise ValueError("Intentional parse error")


class MissingBinaryScanner(ScriptScanner):
    def build_command(self, configuration: Any) -> List[str]:
        return ["/nonexistent/dir/yara-binary-that-does-not-exist", "-r"]


@pytest.fixture
def tool_manager(tmp_tools_dir):
    return ToolManager(tools_dir=str(tmp_tools_dir))


@pytest.fixture
def scan_config(tmp_path):
    return SignatureScan(rules_path=tmp_path / "rules.yar", target_path=tmp_path)


class TestScannerBaseRun:
    @pytest.mark.asyncio
    async def test_successful_scan(self, tool_manager, scan_config):
        scanner = ScriptScanner(tool_manager)
        result = await scanner.run(scan_config)

        assert result.return_code == 0
        assert "mock scan output" in result.stdout
        assert result.failure_reason is None
        assert result.findings_count == 1
        assert result.command[0] == sys.executable
        assert result.started_at is not None
        assert result.completed_at is not None
        assert result.duration_seconds >= 0

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_not_an_error(self, tool_manager, scan_config):
        scanner = NonZeroExitScanner(tool_manager)
        result = await scanner.run(scan_config)

        assert result.return_code == 3
        assert result.failure_reason is None
        assert result.error_kind is None
        assert "Rule_X /tmp/sample" in result.stdout
        assert "warning: slow rule" in result.stderr
        assert result.as_text().startswith("STDOUT:\nRule_X /tmp/sample")

    @pytest.mark.asyncio
    async def test_invalid_bytes_are_replaced(self, tool_manager, scan_config):
        scanner = InvalidBytesScanner(tool_manager)
        result = await scanner.run(scan_config)

        assert result.stdout.startswith("ok ")
        assert "�" in result.stdout
        assert result.stdout.endswith(" done")
        assert result.stderr == "�"

    @pytest.mark.asyncio
    async def test_spawn_failure(self, tool_manager, scan_config):
        scanner = MissingBinaryScanner(tool_manager)
        result = await scanner.run(scan_config)

        assert result.error_kind == ErrorKind.SPAWN
        assert result.return_code is None
        assert result.failure_reason.startswith("Failed to start YARA:")
        assert result.as_text() == result.failure_reason

    @pytest.mark.asyncio
    async def test_missing_configuration_never_spawns(self, tool_manager):
        scanner = MissingBinaryScanner(tool_manager)
        result = await scanner.run(SignatureScan(target_path="/d"))

        assert result.error_kind == ErrorKind.CONFIGURATION
        assert result.failure_reason == "No YARA rules file selected."
        assert result.command == []

    @pytest.mark.asyncio
    async def test_parse_error_doesnt_crash(self, tool_manager, scan_config):
        scanner = ParseErrorScanner(tool_manager)
        result = await scanner.run(scan_config)

        assert result.return_code == 0
        assert result.findings_count == 0
        assert "mock scan output" in result.stdout

    @pytest.mark.asyncio
    async def test_hash_mismatch_never_spawns(self, tmp_tools_dir, tmp_path, scan_config):
        exe = tmp_path / "yara-bin"
        exe.write_bytes(b"tampered")
        tm = ToolManager(
            tools_dir=str(tmp_tools_dir),
            config={"tools": {"yara": {"path": str(exe), "expected_hash": "0" * 64}}},
        )
        result = await ScriptScanner(tm).run(scan_config)

        assert result.error_kind == ErrorKind.INTEGRITY
        assert result.return_code is None
        assert "integrity check" in result.failure_reason
        assert result.stdout == ""

    @pytest.mark.asyncio
    async def test_matching_hash_runs(self, tmp_tools_dir, tmp_path, scan_config):
        exe = tmp_path / "yara-bin"
        exe.write_bytes(b"genuine")
        tm = ToolManager(
            tools_dir=str(tmp_tools_dir),
            config={"tools": {"yara": {
                "path": str(exe),
                "expected_hash": hashlib.sha256(b"genuine").hexdigest(),
            }}},
        )
        result = await ScriptScanner(tm).run(scan_config)

        assert result.error_kind is None
        assert "mock scan output" in result.stdout


class TestScannerBaseHelpers:
    def test_display_name_from_registry(self, tool_manager):
        assert ScriptScanner(tool_manager).display_name == "YARA"

    def test_build_command_prefixes_executable(self, tmp_tools_dir, scan_config):
        tool_dir = tmp_tools_dir / "yara"
        tool_dir.mkdir()
        (tool_dir / "yara").write_text("fake")

        class PlainScanner(ScriptScanner):
            build_command = ScannerBase.build_command

        scanner = PlainScanner(ToolManager(tools_dir=str(tmp_tools_dir)))
        cmd = scanner.build_command(scan_config)
        assert Path(cmd[0]) == (tool_dir / "yara").resolve()
        assert cmd[1:] == [str(scan_config.rules_path), str(scan_config.target_path)]

    def test_configuration_failure_result(self, tool_manager):
        result = ScriptScanner(tool_manager).configuration_failure("missing input")
        assert result.failure_reason == "missing input"
        assert result.error_kind == ErrorKind.CONFIGURATION
        assert result.duration_seconds == 0.0
