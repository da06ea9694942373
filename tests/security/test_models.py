"""Tests for the scan orchestration Pydantic models."""

import pytest
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from secscan.security.models import (
    DEFAULT_REPORT_PATH,
    DEFAULT_RESULTS_PATH,
    ComplianceScan,
    DownloadOutcome,
    DownloadOutcomeKind,
    ErrorKind,
    OpenScapOptions,
    RunState,
    RunStatus,
    ScanConfiguration,
    ScanResult,
    SignatureScan,
    ToolInfo,
    YaraOptions,
)


class TestToolInfo:
    def test_minimal_creation(self):
        tool = ToolInfo(name="oscap", display_name="OpenSCAP", exe_name="oscap")
        assert tool.installed is False
        assert tool.path is None
        assert tool.version_args == ["--version"]

    def test_path_coerced(self):
        tool = ToolInfo(name="yara", display_name="YARA", exe_name="yara", path="/usr/bin/yara")
        assert tool.path == Path("/usr/bin/yara")


class TestScanConfigurations:
    def test_compliance_defaults(self):
        cfg = ComplianceScan()
        assert cfg.kind == "compliance"
        assert cfg.content_path is None
        assert cfg.results_path == DEFAULT_RESULTS_PATH
        assert cfg.report_path == DEFAULT_REPORT_PATH
        assert cfg.options == OpenScapOptions()

    def test_option_flags_default_false(self):
        assert not any(OpenScapOptions().model_dump().values())
        assert not any(YaraOptions().model_dump().values())

    def test_blank_paths_are_unset(self):
        assert ComplianceScan(content_path="").content_path is None
        cfg = SignatureScan(rules_path="  ", target_path="")
        assert cfg.rules_path is None
        assert cfg.target_path is None

    def test_empty_path_objects_are_unset(self):
        assert ComplianceScan(content_path=Path("")).content_path is None
        cfg = SignatureScan(rules_path=Path(""), target_path=Path("."))
        assert cfg.rules_path is None
        assert cfg.target_path is None

    def test_dot_string_is_current_directory(self):
        assert SignatureScan(target_path=".").target_path == Path(".")

    def test_discriminated_union(self):
        adapter = TypeAdapter(ScanConfiguration)
        cfg = adapter.validate_python(
            {"kind": "signature", "rules_path": "/r.yar", "target_path": "/d"}
        )
        assert isinstance(cfg, SignatureScan)
        assert cfg.rules_path == Path("/r.yar")

        cfg = adapter.validate_python({"kind": "compliance", "content_path": "/a.xml"})
        assert isinstance(cfg, ComplianceScan)


class TestScanResult:
    def test_as_text_with_output(self):
        result = ScanResult(tool_name="yara", stdout="match\n", stderr="warn\n")
        assert result.as_text() == "STDOUT:\nmatch\n\nSTDERR:\nwarn\n"
        assert result.failed_to_run is False

    def test_as_text_with_failure(self):
        result = ScanResult(
            tool_name="oscap",
            failure_reason="No XML file selected for scanning.",
            error_kind=ErrorKind.CONFIGURATION,
        )
        assert result.as_text() == "No XML file selected for scanning."
        assert result.failed_to_run is True
        assert result.findings_count == 0


class TestRunStatus:
    def test_initial_state(self):
        status = RunStatus()
        assert status.state == RunState.IDLE
        assert status.is_running is False
        assert status.output == ""

    def test_frozen(self):
        status = RunStatus()
        with pytest.raises(ValidationError):
            status.state = RunState.RUNNING

    def test_output_prefers_result(self):
        result = ScanResult(tool_name="yara", stdout="out", stderr="")
        status = RunStatus(state=RunState.COMPLETED, message="ignored", result=result)
        assert status.output == result.as_text()

    def test_output_falls_back_to_message(self):
        status = RunStatus(state=RunState.RUNNING, message="Scan started...")
        assert status.output == "Scan started..."


class TestDownloadOutcome:
    def test_ok_only_when_saved(self):
        assert DownloadOutcome(kind=DownloadOutcomeKind.SAVED, message="", path="/x").ok
        for kind in DownloadOutcomeKind:
            if kind != DownloadOutcomeKind.SAVED:
                assert not DownloadOutcome(kind=kind, message="").ok
