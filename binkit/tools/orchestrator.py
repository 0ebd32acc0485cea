"""
Bulk install, upgrade and uninstall across the catalog.

Tools are processed one at a time in the order given. Each tool produces
exactly one Outcome; a failing tool never stops the run.
"""

import logging
from typing import Callable, Iterable, Optional

from binkit.config.catalog import ToolCatalog, ToolDefinition
from binkit.core.exceptions import InvalidConfigurationError
from binkit.tools.installer import Installer
from binkit.tools.outcome import REASON_UNEXPECTED_ERROR, Outcome, RunSummary
from binkit.tools.state import InstallationState, StateInspector
from binkit.tools.uninstaller import Uninstaller

logger = logging.getLogger(__name__)

# progress(position, total, name); position is 1-based
ProgressCallback = Callable[[int, int, str], None]


class BulkOrchestrator:
    """
    Drive Installer and Uninstaller over lists of tool names.

    Example:
        >>> orchestrator = BulkOrchestrator(catalog, installer, uninstaller, inspector)
        >>> summary = orchestrator.install(["jq", "yq"])
        >>> [o.kind for o in summary]
    """

    def __init__(
        self,
        catalog: ToolCatalog,
        installer: Installer,
        uninstaller: Optional[Uninstaller] = None,
        inspector: Optional[StateInspector] = None,
    ):
        self.catalog = catalog
        self.installer = installer
        self.uninstaller = uninstaller or Uninstaller(
            probe=installer.probe, terminator=installer.terminator
        )
        self.inspector = inspector or StateInspector(
            github=installer.github, probe=installer.probe
        )

    def install(
        self,
        names: Iterable[str],
        force: bool = False,
        dry_run: bool = False,
        progress: Optional[ProgressCallback] = None,
    ) -> RunSummary:
        """Install or upgrade the named tools in order."""
        return self._run(
            list(names),
            lambda definition: self.installer.install(definition, force=force, dry_run=dry_run),
            progress,
        )

    def install_all(
        self,
        force: bool = False,
        dry_run: bool = False,
        progress: Optional[ProgressCallback] = None,
    ) -> RunSummary:
        """Install or upgrade every catalog tool."""
        return self.install(self.catalog.names(), force=force, dry_run=dry_run, progress=progress)

    def find_outdated(self) -> list[InstallationState]:
        """
        Installed tools whose version differs from the latest release.

        Tools with an unknown installed version or a failed remote lookup are
        left out.
        """
        outdated = []
        for definition in self.catalog.definitions():
            state = self.inspector.inspect(definition)
            if state.latest_error:
                logger.debug(f"Skipping {definition.name}: {state.latest_error}")
                continue
            if state.is_outdated:
                outdated.append(state)
        return outdated

    def upgrade_installed(
        self,
        outdated: Optional[list[InstallationState]] = None,
        dry_run: bool = False,
        progress: Optional[ProgressCallback] = None,
    ) -> RunSummary:
        """
        Upgrade every installed tool that is behind its latest release.

        Args:
            outdated: States from a previous find_outdated() call; looked up
                again when None
            dry_run: Only report what would be done
            progress: Called before each tool
        """
        if outdated is None:
            outdated = self.find_outdated()
        names = [state.name for state in outdated]
        logger.debug(f"Outdated tools: {', '.join(names) or 'none'}")
        return self.install(names, force=False, dry_run=dry_run, progress=progress)

    def uninstall(
        self,
        names: Iterable[str],
        dry_run: bool = False,
        progress: Optional[ProgressCallback] = None,
    ) -> RunSummary:
        """Remove the named tools in order."""
        return self._run(
            list(names),
            lambda definition: self.uninstaller.uninstall(definition, dry_run=dry_run),
            progress,
        )

    def uninstall_all(
        self, dry_run: bool = False, progress: Optional[ProgressCallback] = None
    ) -> RunSummary:
        """Remove every catalog tool that is currently installed."""
        names = [
            definition.name
            for definition in self.catalog.definitions()
            if self.uninstaller.probe.probe(definition) is not None
        ]
        return self.uninstall(names, dry_run=dry_run, progress=progress)

    def _run(
        self,
        names: list[str],
        action: Callable[[ToolDefinition], Outcome],
        progress: Optional[ProgressCallback],
    ) -> RunSummary:
        summary = RunSummary()
        total = len(names)

        for position, name in enumerate(names, start=1):
            if progress:
                progress(position, total, name)

            try:
                definition = self.catalog.get(name)
            except KeyError:
                logger.debug(f"Unknown tool: {name}")
                summary = summary.add(
                    Outcome.failed(name, InvalidConfigurationError.reason)
                )
                continue
            except InvalidConfigurationError as e:
                logger.debug(str(e))
                summary = summary.add(Outcome.failed(name, e.reason))
                continue

            try:
                outcome = action(definition)
            except Exception as e:
                logger.error(f"Unexpected error processing {name}: {e}")
                logger.debug("Traceback:", exc_info=True)
                outcome = Outcome.failed(name, REASON_UNEXPECTED_ERROR)

            summary = summary.add(outcome)

        return summary


__all__ = ["ProgressCallback", "BulkOrchestrator"]
