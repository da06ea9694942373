"""Shared busy flag and result text for background actions."""

import logging
import threading
from typing import Optional

from .models import RunState, RunStatus, ScanResult

logger = logging.getLogger(__name__)


class StatusBoard:
    """Lock-guarded holder of the current RunStatus.

    Readers get the current frozen snapshot; writers replace it whole.
    Only one action may be running at a time: try_begin() is the single
    check-and-set that claims the board.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._status = RunStatus()

    def snapshot(self) -> RunStatus:
        with self._lock:
            return self._status

    @property
    def is_running(self) -> bool:
        return self.snapshot().is_running

    def try_begin(self, message: str) -> bool:
        """Claim the board for a new action; False if one is running."""
        with self._lock:
            if self._status.is_running:
                return False
            self._status = RunStatus(state=RunState.RUNNING, message=message)
            return True

    def complete(self, message: str = "", result: Optional[ScanResult] = None) -> RunStatus:
        with self._lock:
            self._status = RunStatus(state=RunState.COMPLETED, message=message, result=result)
            return self._status

    def publish(self, message: str, result: Optional[ScanResult] = None) -> bool:
        """Complete a synchronous action in place; ignored while running."""
        with self._lock:
            if self._status.is_running:
                logger.debug(f"Dropping status message while running: {message}")
                return False
            self._status = RunStatus(state=RunState.COMPLETED, message=message, result=result)
            return True
