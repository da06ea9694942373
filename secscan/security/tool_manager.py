"""Locates the external scanner executables and queries their versions."""

import hashlib
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

from .models import ToolInfo

logger = logging.getLogger(__name__)

# Default tool registry with static metadata for the supported scanners.
# Users override paths/settings via config.yaml; this is the fallback.
DEFAULT_TOOLS: list[dict[str, Any]] = [
    {
        "name": "oscap",
        "display_name": "OpenSCAP",
        "exe_name": "oscap",
        "homepage": "https://www.open-scap.org",
        "license": "LGPL-2.1",
    },
    {
        "name": "yara",
        "display_name": "YARA",
        "exe_name": "yara",
        "homepage": "https://virustotal.github.io/yara/",
        "license": "BSD-3-Clause",
    },
]


class ToolManager:
    """Manages external scanner executables.

    Resolution order for finding a tool:
    1. Explicit path from config (tools.<name>.path)
    2. tools/<name>/ directory
    3. System PATH
    """

    def __init__(
        self,
        tools_dir: str = "./tools",
        config: Optional[Dict[str, Any]] = None,
    ):
        self.tools_dir = Path(tools_dir).resolve()
        self.config = config or {}
        self._tools: Dict[str, ToolInfo] = {}
        self._configured_paths: Dict[str, Path] = {}
        self._register_default_tools()

    def _register_default_tools(self) -> None:
        """Register all known tools with their default metadata."""
        tools_config = self.config.get("tools", {}) or {}
        for tool_def in DEFAULT_TOOLS:
            name = tool_def["name"]
            # Merge per-tool config overrides
            overrides = tools_config.get(name, {}) or {}
            merged = {**tool_def, **overrides}
            self._tools[name] = ToolInfo(**merged)
            if self._tools[name].path is not None:
                self._configured_paths[name] = self._tools[name].path

    def check_tool(self, tool_name: str) -> ToolInfo:
        """Check if a tool is installed and resolve its path.

        Returns updated ToolInfo with installed=True/False and resolved path.
        """
        if tool_name not in self._tools:
            raise KeyError(f"Unknown tool: {tool_name}")

        tool = self._tools[tool_name]

        # 1. Check explicit config path, on every call since it may appear later
        configured = self._configured_paths.get(tool_name)
        if configured is not None and configured.is_file():
            tool.path = configured
            tool.installed = True
            logger.debug(f"{tool.display_name}: found at configured path {tool.path}")
            return tool
        if configured is not None:
            logger.warning(f"{tool.display_name}: configured path {configured} does not exist")

        # 2. Check tools/<name>/ directory, including nested layouts
        tool_dir = self.tools_dir / tool_name
        if tool_dir.is_dir():
            for candidate in [tool_dir / tool.exe_name, *tool_dir.rglob(tool.exe_name)]:
                if candidate.is_file():
                    tool.path = candidate.resolve()
                    tool.installed = True
                    logger.debug(f"{tool.display_name}: found at {tool.path}")
                    return tool

        # Also check tools dir directly (flat layout)
        candidate_flat = self.tools_dir / tool.exe_name
        if candidate_flat.is_file():
            tool.path = candidate_flat.resolve()
            tool.installed = True
            logger.debug(f"{tool.display_name}: found at {tool.path}")
            return tool

        # 3. Check system PATH
        system_path = shutil.which(tool.exe_name)
        if system_path:
            tool.path = Path(system_path).resolve()
            tool.installed = True
            logger.debug(f"{tool.display_name}: found on PATH at {tool.path}")
            return tool

        tool.installed = False
        tool.path = None
        logger.debug(f"{tool.display_name}: not found")
        return tool

    def check_all_tools(self) -> Dict[str, ToolInfo]:
        """Check all registered tools. Returns dict of name -> ToolInfo."""
        return {name: self.check_tool(name) for name in self._tools}

    def get_tool_path(self, tool_name: str) -> Path:
        """Get resolved path to tool executable. Raises if not installed."""
        tool = self.check_tool(tool_name)
        if not tool.installed or tool.path is None:
            raise FileNotFoundError(
                f"{tool.display_name} ({tool.exe_name}) not found. "
                f"Install it with your package manager, "
                f"or set tools.{tool_name}.path in config.yaml."
            )
        return tool.path

    def get_tool_info(self, tool_name: str) -> ToolInfo:
        """Get the ToolInfo for a registered tool."""
        if tool_name not in self._tools:
            raise KeyError(f"Unknown tool: {tool_name}")
        return self._tools[tool_name]

    def get_tool_version(self, tool_name: str) -> Optional[str]:
        """Run the tool's version switch and return the first output line."""
        tool = self.check_tool(tool_name)
        if not tool.installed or tool.path is None:
            return None
        try:
            completed = subprocess.run(
                [str(tool.path), *tool.version_args],
                capture_output=True,
                timeout=15,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"{tool.display_name}: version query failed: {e}")
            return None

        text = (completed.stdout or completed.stderr).decode("utf-8", errors="replace")
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        tool.version = lines[0] if lines else None
        return tool.version

    def verify_tool_integrity(self, tool_name: str) -> bool:
        """SHA256 hash check against expected_hash if configured."""
        tool = self.check_tool(tool_name)
        if not tool.installed or tool.path is None:
            return False
        if not tool.expected_hash:
            logger.debug(f"{tool.display_name}: no expected hash configured, skipping verification")
            return True

        actual_hash = self._sha256(tool.path)
        matches = actual_hash == tool.expected_hash.lower()
        if not matches:
            logger.warning(
                f"{tool.display_name} hash mismatch: "
                f"expected {tool.expected_hash}, got {actual_hash}"
            )
        return matches

    @staticmethod
    def _sha256(file_path: Path) -> str:
        """Compute SHA256 hash of a file."""
        h = hashlib.sha256()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                h.update(chunk)
        return h.hexdigest()
