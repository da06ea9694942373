"""Shared test fixtures for the secscan test suite."""

import pytest
from pathlib import Path


@pytest.fixture
def tmp_tools_dir(tmp_path):
    """Temporary directory for tool binaries."""
    d = tmp_path / "tools"
    d.mkdir()
    return d


@pytest.fixture
def fixtures_dir():
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "security" / "fixtures"


@pytest.fixture(autouse=True)
def _clean_secscan_env(monkeypatch):
    """Keep SECSCAN_* variables from the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("SECSCAN_"):
            monkeypatch.delenv(key, raising=False)
