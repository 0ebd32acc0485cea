"""
Termination of running tool instances.

Before an executable is replaced or removed, running processes with exactly
that name are asked to exit (SIGTERM via ``pkill -x``), given a short grace
period, and then killed (``pkill -9 -x``). This is best-effort: failures are
logged and never abort the surrounding operation.
"""

import logging
import subprocess
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD = 2.0
COMMAND_TIMEOUT = 10


@dataclass
class TerminationResult:
    """What happened when terminating processes by name."""

    name: str
    found: bool = False
    forced: bool = False
    survivors: bool = False


class ProcessTerminator:
    """Terminates processes matched by exact executable name."""

    def __init__(
        self,
        grace_period: float = DEFAULT_GRACE_PERIOD,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.grace_period = grace_period
        self._sleep = sleep

    def is_running(self, name: str) -> bool:
        """Check whether any process named exactly `name` is running."""
        return self._run(["pgrep", "-x", name]) == 0

    def terminate(self, name: str) -> TerminationResult:
        """
        Terminate all processes named `name`, gracefully then forcefully.

        Args:
            name: Exact process name

        Returns:
            TerminationResult describing the escalation
        """
        result = TerminationResult(name=name)

        if not self.is_running(name):
            return result

        result.found = True
        logger.warning(f"Found running {name} processes. Terminating...")
        self._run(["pkill", "-x", name])
        self._sleep(self.grace_period)

        if self.is_running(name):
            logger.warning(f"Force killing remaining {name} processes...")
            result.forced = True
            self._run(["pkill", "-9", "-x", name])
            result.survivors = self.is_running(name)

        if result.survivors:
            logger.warning(f"Some {name} processes are still running")
        else:
            logger.info(f"{name} processes terminated")
        return result

    def _run(self, cmd: list[str]) -> int:
        """Run a process-control command, returning its exit code (-1 on error)."""
        try:
            completed = subprocess.run(
                cmd, capture_output=True, text=True, timeout=COMMAND_TIMEOUT
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Failed to run {' '.join(cmd)}: {e}")
            return -1
        return completed.returncode


__all__ = ["DEFAULT_GRACE_PERIOD", "TerminationResult", "ProcessTerminator"]
