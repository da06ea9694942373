"""Fetches the remote OVAL definitions document and saves it locally.

The document is opaque here: it is decoded as text only to check that it
is text, then written verbatim.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import httpx

from .exceptions import DecodeError, DownloadError, NetworkError
from .models import DownloadOutcome, DownloadOutcomeKind

logger = logging.getLogger(__name__)

DEFAULT_DEFINITIONS_URL = "https://redos.red-soft.ru/support/secure/redos.xml"

DestinationChooser = Callable[[], Optional[Path]]


class DefinitionsDownloader:
    """Synchronous HTTP fetch of a definitions file.

    Runs on a background worker; the destination prompt is supplied by the
    caller so the presentation layer decides how to ask for it.
    """

    def __init__(
        self,
        timeout: float = 120.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout = timeout
        self._transport = transport

    def fetch(self, url: str) -> str:
        """Download ``url`` and return its body as text.

        Raises:
            NetworkError: transport failure or non-success HTTP status.
            DecodeError: body is not valid UTF-8.
        """
        logger.info(f"Downloading definitions from {url}")
        try:
            with httpx.Client(
                follow_redirects=True,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = client.get(url)
                resp.raise_for_status()
                content = resp.content
        except httpx.HTTPError as e:
            raise NetworkError(f"File download error: {e}") from e

        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Error reading response content: {e}") from e

        logger.info(f"Downloaded {len(content)} bytes from {url}")
        return text

    def save(self, text: str, destination: Optional[Path]) -> DownloadOutcome:
        """Write fetched text to ``destination``; None means the user cancelled."""
        if destination is None:
            logger.info("Definitions download cancelled at save step")
            return DownloadOutcome(
                kind=DownloadOutcomeKind.CANCELLED,
                message="Download cancelled by user.",
            )

        destination = Path(destination)
        try:
            # bytes, so line endings are not translated
            destination.write_bytes(text.encode("utf-8"))
        except OSError as e:
            logger.error(f"Failed to save definitions to {destination}: {e}")
            return DownloadOutcome(
                kind=DownloadOutcomeKind.IO_ERROR,
                message=f"Failed to save file: {e}",
            )

        logger.info(f"Definitions saved to {destination}")
        return DownloadOutcome(
            kind=DownloadOutcomeKind.SAVED,
            message=f"XML file downloaded and saved to: {destination}",
            path=destination,
        )

    def run(self, url: str, choose_destination: DestinationChooser) -> DownloadOutcome:
        """Fetch, ask for a destination, save. Never raises DownloadError."""
        try:
            text = self.fetch(url)
        except DownloadError as e:
            logger.error(str(e))
            kind = (
                DownloadOutcomeKind.DECODE_ERROR
                if isinstance(e, DecodeError)
                else DownloadOutcomeKind.NETWORK_ERROR
            )
            return DownloadOutcome(kind=kind, message=str(e))

        return self.save(text, choose_destination())
