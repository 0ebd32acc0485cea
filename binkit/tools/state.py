"""
Installed-vs-latest state of catalog tools.

State is derived live from PATH and the GitHub API on every call; nothing
is cached or persisted.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from binkit.config.catalog import ToolCatalog, ToolDefinition
from binkit.core.exceptions import RemoteVersionUnavailableError
from binkit.core.github import GitHubClient
from binkit.tools.probe import LocalVersionProbe

logger = logging.getLogger(__name__)


class ToolStatus(Enum):
    NOT_INSTALLED = "not installed"
    UP_TO_DATE = "up to date"
    OUTDATED = "outdated"
    UNKNOWN = "unknown"
    INVALID = "invalid configuration"


@dataclass(frozen=True)
class InstallationState:
    """Where a tool is installed, at which version, and what is latest."""

    name: str
    installed_path: Optional[Path] = None
    installed_version: Optional[str] = None
    latest_version: Optional[str] = None
    latest_error: Optional[str] = None
    invalid: bool = False

    @property
    def is_installed(self) -> bool:
        """Installed with a known version."""
        return self.installed_version is not None

    @property
    def status(self) -> ToolStatus:
        if self.invalid:
            return ToolStatus.INVALID
        if not self.is_installed:
            return ToolStatus.NOT_INSTALLED
        if self.latest_version is None:
            return ToolStatus.UNKNOWN
        if self.installed_version == self.latest_version:
            return ToolStatus.UP_TO_DATE
        return ToolStatus.OUTDATED

    @property
    def is_outdated(self) -> bool:
        return self.status is ToolStatus.OUTDATED


class StateInspector:
    """Compute InstallationState for tools."""

    def __init__(
        self,
        github: Optional[GitHubClient] = None,
        probe: Optional[LocalVersionProbe] = None,
    ):
        self.github = github or GitHubClient()
        self.probe = probe or LocalVersionProbe()

    def inspect(self, definition: ToolDefinition, check_latest: bool = True) -> InstallationState:
        """
        Probe local installation and (optionally) the latest release.

        Args:
            definition: Tool to inspect
            check_latest: Query GitHub for the latest version
        """
        installed = self.probe.probe(definition)
        latest = None
        latest_error = None

        if check_latest:
            try:
                latest = self.github.latest_version(definition.repository)
            except RemoteVersionUnavailableError as e:
                logger.debug(f"{definition.name}: {e}")
                latest_error = str(e)

        return InstallationState(
            name=definition.name,
            installed_path=installed.path if installed else None,
            installed_version=installed.version if installed else None,
            latest_version=latest,
            latest_error=latest_error,
        )

    def inspect_catalog(self, catalog: ToolCatalog) -> list[InstallationState]:
        """Inspect every catalog tool in order; invalid records are flagged."""
        states = []
        for name in catalog.names():
            if not catalog.is_valid(name):
                states.append(InstallationState(name=name, invalid=True))
                continue
            states.append(self.inspect(catalog.get(name)))
        return states


__all__ = ["ToolStatus", "InstallationState", "StateInspector"]
