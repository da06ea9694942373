"""Helpers for asking the user something from a background worker."""
from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable

from PyQt6.QtCore import QCoreApplication, QObject, QThread, Qt, pyqtSignal, pyqtSlot

POLL_SECONDS = 0.1


class MainThreadPrompt(QObject):
    """Callable that runs *ask* on the GUI thread and returns its answer.

    Create it on the GUI thread. When called from a worker thread the call
    waits until the GUI thread has shown the dialog. Once the application
    starts quitting there is no event loop left to show it, so a waiting
    or later call answers None (cancelled) instead of hanging.
    """

    _requested = pyqtSignal(object)

    def __init__(self, ask: Callable[[], Path | None], parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._ask = ask
        self._closed = threading.Event()
        self._requested.connect(self._on_requested, Qt.ConnectionType.QueuedConnection)

        app = QCoreApplication.instance()
        if app is not None:
            app.aboutToQuit.connect(self.close)

    @pyqtSlot()
    def close(self) -> None:
        """Stop showing dialogs; pending and later calls answer None."""
        self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set() or QCoreApplication.closingDown()

    @pyqtSlot(object)
    def _on_requested(self, request: dict) -> None:
        if not self.closed:
            request["answer"] = self._ask()
        request["done"].set()

    def __call__(self) -> Path | None:
        if self.closed:
            return None
        if QThread.currentThread() == self.thread():
            return self._ask()

        request = {"answer": None, "done": threading.Event()}
        self._requested.emit(request)
        while not request["done"].wait(POLL_SECONDS):
            if self.closed:
                return None
        return request["answer"]
