"""
Artifact download and extraction into an ephemeral workspace.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import requests

from binkit.core.download import DEFAULT_TIMEOUT, DownloadError, download_file
from binkit.core.exceptions import DownloadFailedError, ExtractFailedError
from binkit.core.filesystem import (
    ArchiveExtractionError,
    ArchiveKind,
    classify_archive,
    extract_archive,
    temporary_directory,
)
from binkit.tools.artifact import Artifact

logger = logging.getLogger(__name__)

# Download file names inside the workspace, by archive kind
_ARCHIVE_FILE_NAMES = {
    ArchiveKind.TAR_GZ: "archive.tar.gz",
    ArchiveKind.ZIP: "archive.zip",
}


@dataclass(frozen=True)
class FetchedArtifact:
    """Downloaded (and extracted) artifact inside a workspace."""

    workspace: Path
    kind: ArchiveKind
    binary_path: str  # relative to workspace; may contain a wildcard


class ArtifactFetcher:
    """
    Download release artifacts into scratch workspaces.

    Example:
        >>> fetcher = ArtifactFetcher()
        >>> with fetcher.fetch(artifact, "jq") as fetched:
        ...     print(fetched.workspace / fetched.binary_path)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        workspace_prefix: str = "binkit_",
    ):
        self.session = session
        self.timeout = timeout
        self.workspace_prefix = workspace_prefix

    @contextmanager
    def fetch(self, artifact: Artifact, application: str) -> Iterator[FetchedArtifact]:
        """
        Download and unpack an artifact; the workspace is removed on exit.

        Archives (.tar.gz, .tgz, .zip) are extracted into the workspace. Any
        other artifact is a bare executable saved as `application`, and the
        binary path is forced to `application` whatever the template said.

        Raises:
            DownloadFailedError: If the download fails
            ExtractFailedError: If the archive cannot be extracted
        """
        kind = classify_archive(artifact.archive_name)

        with temporary_directory(prefix=self.workspace_prefix) as workspace:
            if kind is ArchiveKind.BINARY:
                destination = workspace / application
                binary_path = application
            else:
                destination = workspace / _ARCHIVE_FILE_NAMES[kind]
                binary_path = artifact.binary_path

            self._download(artifact.url, destination)

            if kind is not ArchiveKind.BINARY:
                try:
                    extract_archive(destination, workspace, kind=kind)
                except ArchiveExtractionError as e:
                    raise ExtractFailedError(str(e)) from e
                destination.unlink(missing_ok=True)

            yield FetchedArtifact(workspace=workspace, kind=kind, binary_path=binary_path)

    def _download(self, url: str, destination: Path) -> None:
        try:
            download_file(
                url,
                destination,
                session=self.session,
                timeout=self.timeout,
            )
        except DownloadError as e:
            raise DownloadFailedError(str(e)) from e


__all__ = ["FetchedArtifact", "ArtifactFetcher"]
