"""Single-tool removal."""

import logging
from typing import Optional

from binkit.config.catalog import ToolDefinition
from binkit.core.exceptions import RemovalFailedError
from binkit.core.process import ProcessTerminator
from binkit.tools.outcome import PERMISSION_DENIED, REASON_NOT_INSTALLED, Outcome
from binkit.tools.probe import LocalVersionProbe

logger = logging.getLogger(__name__)


class Uninstaller:
    """Remove an installed tool's executable."""

    def __init__(
        self,
        probe: Optional[LocalVersionProbe] = None,
        terminator: Optional[ProcessTerminator] = None,
    ):
        self.probe = probe or LocalVersionProbe()
        self.terminator = terminator or ProcessTerminator()

    def uninstall(self, definition: ToolDefinition, dry_run: bool = False) -> Outcome:
        """
        Remove the executable found on PATH for this tool.

        Returns:
            REMOVED, PLANNED (dry run), SKIPPED (not installed) or
            FAILED (removal failed)
        """
        installed = self.probe.probe(definition)
        if installed is None:
            return Outcome.skipped(definition.name, REASON_NOT_INSTALLED)

        if dry_run:
            return Outcome.planned(
                definition.name,
                f"would remove {definition.name} ({installed.path})",
                version=installed.version,
                path=installed.path,
            )

        self.terminator.terminate(definition.application)

        try:
            installed.path.unlink()
        except OSError as e:
            reason = RemovalFailedError.reason
            if isinstance(e, PermissionError):
                reason = f"{reason}: {PERMISSION_DENIED}"
            error = RemovalFailedError(
                f"Failed to remove {definition.name} from {installed.path}: {e}",
                reason=reason,
            )
            logger.debug(str(error))
            return Outcome.failed(definition.name, error.reason)

        logger.info(f"Removed {definition.name} from {installed.path}")
        return Outcome.removed(definition.name, installed.path)


__all__ = ["Uninstaller"]
