"""Actions on the HTML report written by oscap."""

import logging
import shutil
import webbrowser
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def open_report(
    report_path: Path,
    opener: Optional[Callable[[str], bool]] = None,
) -> str:
    """Open the report with the default application; returns a status line."""
    opener = opener or webbrowser.open
    report_path = Path(report_path)
    if not report_path.exists():
        return f"Report not found at path: {report_path}"

    try:
        opened = opener(report_path.resolve().as_uri())
    except (webbrowser.Error, OSError) as e:
        logger.error(f"Failed to open report {report_path}: {e}")
        return f"Failed to open report: {e}"

    if opened is False:
        return f"Failed to open report: no application available for {report_path}"
    logger.info(f"Opened report {report_path}")
    return f"Opening report: {report_path}"


def copy_report(report_path: Path, destination: Optional[Path]) -> str:
    """Copy the report to ``destination``; None means the user cancelled."""
    report_path = Path(report_path)
    if not report_path.exists():
        return f"Report not found at path: {report_path}"
    if destination is None:
        return "Report download cancelled by user."

    try:
        shutil.copyfile(report_path, destination)
    except OSError as e:
        logger.error(f"Failed to copy report to {destination}: {e}")
        return f"Failed to copy report: {e}"

    logger.info(f"Report copied to {destination}")
    return f"Report copied successfully to: {destination}"
