"""Exception hierarchy for scan orchestration and definitions downloads.

A non-zero exit code from a scanner is never an exception: the tools use
exit codes to report findings.
"""


class SecScanError(Exception):
    """Base class for all secscan errors."""


class ConfigurationError(SecScanError):
    """A required input was not provided before launching a scan."""


class SpawnError(SecScanError):
    """The operating system could not start the scanner process."""

    def __init__(self, tool_name: str, cause: OSError):
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"Failed to start {tool_name}: {cause}")


class DownloadError(SecScanError):
    """Base class for definitions download failures."""


class NetworkError(DownloadError):
    """Transport failure or non-success HTTP status."""


class DecodeError(DownloadError):
    """Response body could not be interpreted as text."""
