"""
Single-tool install/upgrade orchestration.

Flow for one tool:

    version check -> (skip | terminate processes -> download -> extract
                     -> locate binary -> replace installed binary) | failed

Every failure is converted into a ``Failed(reason)`` outcome; nothing here
raises for tool-scoped problems, so a bulk run can always continue with the
next tool.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from binkit.config.catalog import ToolDefinition
from binkit.config.settings import Settings
from binkit.core.exceptions import (
    BinaryNotFoundError,
    InstallationFailedError,
    ToolError,
    UnsupportedArchitectureError,
)
from binkit.core.filesystem import find_matching_file, replace_file_atomic
from binkit.core.github import GitHubClient
from binkit.core.platform import resolve_architecture
from binkit.core.process import ProcessTerminator
from binkit.tools.artifact import Artifact, has_wildcard, resolve_artifact
from binkit.tools.fetcher import ArtifactFetcher, FetchedArtifact
from binkit.tools.outcome import (
    PERMISSION_DENIED,
    REASON_BINARY_NOT_IN_ARCHIVE,
    REASON_FORCE_NOT_INSTALLED,
    REASON_UP_TO_DATE,
    Outcome,
)
from binkit.tools.probe import LocalVersionProbe, ProbeResult

logger = logging.getLogger(__name__)


class Installer:
    """
    Install or upgrade one tool at a time.

    Collaborators are injected so each step can be replaced in tests.

    Example:
        >>> installer = Installer(Settings(install_path=Path("/usr/local/bin")))
        >>> outcome = installer.install(catalog.get("jq"))
        >>> outcome.kind
        <OutcomeKind.INSTALLED: 'installed'>
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        github: Optional[GitHubClient] = None,
        probe: Optional[LocalVersionProbe] = None,
        fetcher: Optional[ArtifactFetcher] = None,
        terminator: Optional[ProcessTerminator] = None,
        arch_resolver: Optional[Callable[[], str]] = None,
    ):
        self.settings = settings or Settings()
        self.github = github or GitHubClient(
            token=self.settings.github_token, timeout=self.settings.timeout
        )
        self.probe = probe or LocalVersionProbe()
        self.fetcher = fetcher or ArtifactFetcher(
            session=self.github.session, timeout=self.settings.timeout
        )
        self.terminator = terminator or ProcessTerminator(
            grace_period=self.settings.grace_period
        )
        self.arch_resolver = arch_resolver or resolve_architecture

    def install(
        self, definition: ToolDefinition, force: bool = False, dry_run: bool = False
    ) -> Outcome:
        """
        Install, upgrade or force-reinstall a tool.

        Args:
            definition: Valid tool definition
            force: Reinstall the latest release even when up to date; only
                affects tools that are already installed
            dry_run: Decide and describe, but do not touch processes,
                network downloads or the filesystem

        Returns:
            Outcome for this tool
        """
        try:
            return self._install(definition, force, dry_run)
        except ToolError as e:
            logger.debug(f"{definition.name}: {e}")
            return Outcome.failed(definition.name, e.reason)

    def _install(self, definition: ToolDefinition, force: bool, dry_run: bool) -> Outcome:
        installed = self.probe.probe(definition)
        installed_version = installed.version if installed else None

        # Version check
        if force and installed is None:
            return Outcome.skipped(definition.name, REASON_FORCE_NOT_INSTALLED)

        latest = self.github.latest_version(definition.repository)
        logger.debug(
            f"{definition.name}: installed={installed_version or '-'} latest={latest}"
        )

        if not force and installed is not None and installed_version == latest:
            return Outcome.skipped(definition.name, REASON_UP_TO_DATE, version=latest)

        if dry_run:
            return self._plan(definition, installed, latest, force)

        artifact = resolve_artifact(definition, latest, self.arch_resolver())
        target = self.settings.target_path(definition.application)

        self.terminator.terminate(definition.application)

        with self.fetcher.fetch(artifact, definition.application) as fetched:
            binary = self._locate(fetched)
            self._replace(definition, binary, target, installed)

        logger.info(f"{definition.application} {latest} installed to {target}")
        if force:
            return Outcome.force_reinstalled(definition.name, latest, target)
        return Outcome.installed(definition.name, latest, target)

    def _plan(
        self,
        definition: ToolDefinition,
        installed: Optional[ProbeResult],
        latest: str,
        force: bool,
    ) -> Outcome:
        """Describe what a real run would do."""
        if force:
            current = installed.version if installed and installed.version else "unknown version"
            reason = f"would force reinstall {definition.name} (currently {current})"
        elif installed is not None and installed.version:
            reason = f"would update {definition.name} from {installed.version} to {latest}"
        else:
            reason = f"would install {definition.name} {latest}"

        url = None
        try:
            artifact: Artifact = resolve_artifact(definition, latest, self.arch_resolver())
            url = artifact.url
        except UnsupportedArchitectureError as e:
            logger.debug(f"{definition.name}: no download URL in dry run: {e}")

        return Outcome.planned(
            definition.name,
            reason,
            version=latest,
            path=self.settings.target_path(definition.application),
            url=url,
        )

    def _locate(self, fetched: FetchedArtifact) -> Path:
        """
        Find the executable inside the workspace.

        Raises:
            BinaryNotFoundError: If nothing matches
        """
        if has_wildcard(fetched.binary_path):
            match = find_matching_file(fetched.workspace, fetched.binary_path)
            if match is None:
                raise BinaryNotFoundError(
                    f"Binary not found in archive: {fetched.binary_path}",
                    reason=REASON_BINARY_NOT_IN_ARCHIVE,
                )
            return match

        candidate = fetched.workspace / fetched.binary_path
        if not candidate.is_file():
            raise BinaryNotFoundError(f"Binary not found: {fetched.binary_path}")
        return candidate

    def _replace(
        self,
        definition: ToolDefinition,
        binary: Path,
        target: Path,
        installed: Optional[ProbeResult],
    ) -> None:
        """
        Swap the located binary into place.

        Raises:
            InstallationFailedError: If the old copy cannot be removed or the
                new one cannot be written
        """
        try:
            if installed is not None and installed.path != target and installed.path.exists():
                logger.info(
                    f"Removing old {definition.application} installation at {installed.path}"
                )
                installed.path.unlink()

            replace_file_atomic(binary, target, mode=0o755)
        except PermissionError as e:
            raise InstallationFailedError(
                f"Permission denied installing {definition.application} to {target}: {e}",
                reason=f"{InstallationFailedError.reason}: {PERMISSION_DENIED}",
            ) from e
        except OSError as e:
            raise InstallationFailedError(
                f"Failed to install {definition.application} to {target}: {e}"
            ) from e


__all__ = ["Installer"]
