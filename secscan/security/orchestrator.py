"""Scan orchestration: one background action at a time, shared status.

The orchestrator owns the stored scan configuration, assembles commands
through the per-tool scanners and runs them on a single-worker thread
pool. The presentation layer polls current_status().

There is no cancellation and no timeout: a launched scan runs until the
external process exits, and a download runs until the request completes.
"""

import asyncio
import logging
import threading
from concurrent import futures
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .downloader import DEFAULT_DEFINITIONS_URL, DefinitionsDownloader, DestinationChooser
from .exceptions import ConfigurationError
from .models import (
    DEFAULT_REPORT_PATH,
    DEFAULT_RESULTS_PATH,
    ComplianceScan,
    DownloadOutcome,
    RunStatus,
    ScanConfiguration,
    ScanResult,
)
from .report import copy_report, open_report
from .scanner_base import ScannerBase
from .scanners import OpenScapScanner, YaraScanner
from .status import StatusBoard
from .tool_manager import ToolManager

logger = logging.getLogger(__name__)


class ScanOrchestrator:
    """Coordinates configuration, process launch and result capture."""

    def __init__(
        self,
        tool_manager: Optional[ToolManager] = None,
        config: Optional[Dict[str, Any]] = None,
        scanners: Optional[Dict[str, ScannerBase]] = None,
        downloader: Optional[DefinitionsDownloader] = None,
    ):
        self.config = config or {}
        self.tool_manager = tool_manager or ToolManager(
            tools_dir=self.config.get("tools_dir", "./tools"),
            config=self.config,
        )
        self.downloader = downloader or DefinitionsDownloader(
            timeout=self.config.get("download_timeout", 120.0),
        )
        self.download_url = self.config.get("download_url", DEFAULT_DEFINITIONS_URL)
        self.board = StatusBoard()

        self._scanners: Dict[str, ScannerBase] = scanners or self._default_scanners()
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="secscan")
        self._future: Optional[futures.Future] = None
        self._closed = False

        self._last_compliance = ComplianceScan(
            results_path=Path(self.config.get("results_path") or DEFAULT_RESULTS_PATH),
            report_path=Path(self.config.get("report_path") or DEFAULT_REPORT_PATH),
        )
        self._configuration: ScanConfiguration = self._last_compliance
        self._last_download: Optional[DownloadOutcome] = None
        self._last_download_path: Optional[Path] = None

    def _default_scanners(self) -> Dict[str, ScannerBase]:
        tools_config = self.config.get("tools", {}) or {}
        return {
            "compliance": OpenScapScanner(self.tool_manager, tools_config.get("oscap", {})),
            "signature": YaraScanner(self.tool_manager, tools_config.get("yara", {})),
        }

    # ---- configuration ----

    def configure(self, configuration: ScanConfiguration) -> None:
        """Replace the stored configuration. Observed by the next launch."""
        with self._lock:
            self._configuration = configuration
            if isinstance(configuration, ComplianceScan):
                self._last_compliance = configuration

    @property
    def configuration(self) -> ScanConfiguration:
        with self._lock:
            return self._configuration

    @property
    def compliance_configuration(self) -> ComplianceScan:
        """The most recent compliance configuration, for its output paths."""
        with self._lock:
            return self._last_compliance

    @property
    def report_path(self) -> Path:
        return self.compliance_configuration.report_path

    @property
    def last_download(self) -> Optional[DownloadOutcome]:
        with self._lock:
            return self._last_download

    @property
    def last_download_path(self) -> Optional[Path]:
        """Where the most recent successful download was saved."""
        with self._lock:
            return self._last_download_path

    def get_scanner(self, kind: str) -> ScannerBase:
        if kind not in self._scanners:
            raise KeyError(f"No scanner registered for '{kind}'")
        return self._scanners[kind]

    # ---- status ----

    def current_status(self) -> RunStatus:
        return self.board.snapshot()

    def publish(self, message: str) -> bool:
        """Show a user-visible note; ignored while an action is running."""
        return self.board.publish(message)

    # ---- actions ----

    def launch_scan(self) -> bool:
        """Start the configured scan in the background.

        Returns False if another action is running (the request is ignored).

        Raises:
            ConfigurationError: a required path is missing. The status is
                already set to completed with the same message.
        """
        self._ensure_open()
        configuration = self.configuration.model_copy(deep=True)
        scanner = self.get_scanner(configuration.kind)

        try:
            scanner.validate(configuration)
        except ConfigurationError as e:
            result = scanner.configuration_failure(str(e))
            if not self.board.publish(str(e), result=result):
                logger.info("Scan launch ignored: another action is running")
                return False
            logger.warning(f"Scan not started: {e}")
            raise

        if not self.board.try_begin("Scan started..."):
            logger.info("Scan launch ignored: another action is running")
            return False

        self._submit(self._run_scan, scanner, configuration)
        return True

    def launch_download(
        self,
        choose_destination: DestinationChooser,
        url: Optional[str] = None,
    ) -> bool:
        """Download the definitions file in the background.

        ``choose_destination`` is called on the worker after the fetch
        succeeds and returns a path, or None if the user cancelled.
        """
        self._ensure_open()
        url = url or self.download_url
        if not self.board.try_begin("Starting XML file download..."):
            logger.info("Download ignored: another action is running")
            return False

        self._submit(self._run_download, url, choose_destination)
        return True

    def open_report(self, opener: Optional[Callable[[str], bool]] = None) -> str:
        message = open_report(self.report_path, opener)
        self.publish(message)
        return message

    def copy_report(self, destination: Optional[Path]) -> str:
        message = copy_report(self.report_path, destination)
        self.publish(message)
        return message

    def wait(self, timeout: Optional[float] = None) -> RunStatus:
        """Block until the in-flight action (if any) finishes."""
        with self._lock:
            future = self._future
        if future is not None:
            futures.wait([future], timeout=timeout)
        return self.current_status()

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    # ---- background units ----

    def _ensure_open(self) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("Orchestrator has been shut down")

    def _submit(self, fn: Callable[..., None], *args: Any) -> None:
        with self._lock:
            self._future = self._executor.submit(fn, *args)

    def _run_scan(self, scanner: ScannerBase, configuration: ScanConfiguration) -> None:
        try:
            result = asyncio.run(scanner.run(configuration))
        except Exception as e:
            logger.error(f"{scanner.display_name} scan crashed: {e}", exc_info=True)
            result = ScanResult(
                tool_name=scanner.tool_name,
                failure_reason=f"Error while running {scanner.display_name}: {e}",
            )
        self.board.complete(result=result)

    def _run_download(self, url: str, choose_destination: DestinationChooser) -> None:
        try:
            outcome = self.downloader.run(url, choose_destination)
        except Exception as e:
            logger.error(f"Definitions download crashed: {e}", exc_info=True)
            self.board.complete(message=f"File download error: {e}")
            return

        with self._lock:
            self._last_download = outcome
            if outcome.ok:
                self._last_download_path = outcome.path
        self.board.complete(message=outcome.message)
