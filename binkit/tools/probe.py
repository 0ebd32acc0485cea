"""
Local installation probe.

Finds a tool's executable on PATH and asks it for its version.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from binkit.config.catalog import ToolDefinition
from binkit.core.filesystem import find_executable
from binkit.core.version import RegexVersionExtractor, VersionExtractor, normalize_version

logger = logging.getLogger(__name__)

VERSION_COMMAND_TIMEOUT = 10


@dataclass(frozen=True)
class ProbeResult:
    """An executable found on PATH and the version it reports (if any)."""

    path: Path
    version: Optional[str] = None


class LocalVersionProbe:
    """
    Detect whether a tool is installed, where, and at which version.

    A tool whose executable is found but whose version cannot be parsed is
    reported with ``version=None``: it is treated as "not installed" when
    comparing versions, but its path is still known so it can be replaced or
    removed.
    """

    def __init__(
        self,
        extractor: Optional[VersionExtractor] = None,
        search_paths: Optional[list[Path]] = None,
        timeout: float = VERSION_COMMAND_TIMEOUT,
    ):
        self.extractor = extractor or RegexVersionExtractor()
        self.search_paths = search_paths
        self.timeout = timeout

    def probe(self, definition: ToolDefinition) -> Optional[ProbeResult]:
        """
        Probe a tool's installation.

        Returns:
            ProbeResult, or None when the executable is not on PATH
        """
        path = find_executable(definition.application, self.search_paths)
        if path is None:
            logger.debug(f"{definition.application} not found on PATH")
            return None

        output = self._version_output(path, definition.effective_version_args)
        version = None
        if output:
            raw = self.extractor.extract(definition.effective_version_pattern, output)
            if raw:
                version = normalize_version(raw)

        if version is None:
            logger.debug(f"Could not determine version of {path}")
        else:
            logger.debug(f"Found {definition.application} {version} at {path}")

        return ProbeResult(path=path, version=version)

    def _version_output(self, path: Path, args: tuple[str, ...]) -> str:
        """Run the version command and return stdout and stderr combined."""
        try:
            result = subprocess.run(
                [str(path), *args],
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Version command for {path} failed: {e}")
            return ""

        return (result.stdout or "") + (result.stderr or "")


__all__ = ["ProbeResult", "LocalVersionProbe"]
