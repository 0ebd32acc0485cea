"""
Network download helper.

Streams a URL to a local file with a finite timeout. A failed download never
leaves a partial file behind.
"""

import logging
from pathlib import Path
from typing import Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
CHUNK_SIZE = 8192


class DownloadError(Exception):
    """Exception raised when download fails."""

    pass


def download_file(
    url: str,
    destination: Path,
    session: Optional[requests.Session] = None,
    headers: Optional[dict] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Path:
    """
    Download file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file
        session: Optional requests session to reuse connections
        headers: Extra request headers
        timeout: Request timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request or the write fails
        ValueError: If URL or destination is invalid

    Example:
        >>> from binkit.core.download import download_file
        >>> download_file("https://example.com/tool.tar.gz", Path("/tmp/tool.tar.gz"))
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    try:
        return _stream_to_file(url, destination, session, headers or {}, timeout)
    except (RequestException, OSError) as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Download of {url} failed: {e}") from e


def _stream_to_file(
    url: str,
    destination: Path,
    session: Optional[requests.Session],
    headers: dict,
    timeout: float,
) -> Path:
    """Perform a single streamed download."""
    logger.info(f"Downloading from {url}")

    getter = session.get if session is not None else requests.get
    response = getter(
        url, headers=headers, stream=True, timeout=timeout, allow_redirects=True
    )
    try:
        response.raise_for_status()

        downloaded = 0
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)
    finally:
        response.close()

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


__all__ = ["DEFAULT_TIMEOUT", "DownloadError", "download_file"]
