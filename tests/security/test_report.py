"""Tests for opening and copying the HTML report."""

import webbrowser

from secscan.security.report import copy_report, open_report


class TestOpenReport:
    def test_missing(self, tmp_path):
        calls = []
        path = tmp_path / "report.html"
        assert open_report(path, opener=calls.append) == f"Report not found at path: {path}"
        assert calls == []

    def test_opens_file_uri(self, tmp_path):
        path = tmp_path / "report.html"
        path.write_text("<html/>")
        calls = []

        message = open_report(path, opener=lambda uri: calls.append(uri) or True)

        assert message == f"Opening report: {path}"
        assert calls == [path.resolve().as_uri()]

    def test_no_browser(self, tmp_path):
        path = tmp_path / "report.html"
        path.write_text("<html/>")
        assert open_report(path, opener=lambda uri: False).startswith("Failed to open report:")

    def test_opener_error(self, tmp_path):
        path = tmp_path / "report.html"
        path.write_text("<html/>")

        def broken(uri):
            raise webbrowser.Error("could not locate runnable browser")

        assert open_report(path, opener=broken) == (
            "Failed to open report: could not locate runnable browser"
        )

    def test_default_opener_is_webbrowser(self, tmp_path, monkeypatch):
        path = tmp_path / "report.html"
        path.write_text("<html/>")
        calls = []
        monkeypatch.setattr(webbrowser, "open", lambda uri: calls.append(uri) or True)
        open_report(path)
        assert len(calls) == 1


class TestCopyReport:
    def test_copies_bytes(self, tmp_path):
        src = tmp_path / "report.html"
        src.write_bytes(b"<html>\xd0\x9e\xd0\xa1</html>")
        dest = tmp_path / "saved.html"

        assert copy_report(src, dest) == f"Report copied successfully to: {dest}"
        assert dest.read_bytes() == src.read_bytes()

    def test_missing_report_checked_first(self, tmp_path):
        src = tmp_path / "report.html"
        assert copy_report(src, None) == f"Report not found at path: {src}"

    def test_cancelled(self, tmp_path):
        src = tmp_path / "report.html"
        src.write_text("x")
        assert copy_report(src, None) == "Report download cancelled by user."

    def test_copy_failure(self, tmp_path):
        src = tmp_path / "report.html"
        src.write_text("x")
        message = copy_report(src, tmp_path / "no-such-dir" / "r.html")
        assert message.startswith("Failed to copy report:")
