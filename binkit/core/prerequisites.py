"""
Checks for external utilities binkit shells out to.

Process control relies on procps (``pgrep``/``pkill``). Missing utilities are
fatal for the whole run and are reported before any tool is processed.
"""

import logging
import shutil
from typing import Callable, Optional, Sequence

from binkit.core.exceptions import PrerequisiteError

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("pgrep", "pkill")

# Package manager -> install command template, checked in order
_INSTALL_HINTS = (
    ("apt", "sudo apt update && sudo apt install -y {packages}"),
    ("dnf", "sudo dnf install -y {packages}"),
    ("yum", "sudo yum install -y {packages}"),
    ("pacman", "sudo pacman -S {packages}"),
    ("zypper", "sudo zypper install {packages}"),
    ("apk", "sudo apk add {packages}"),
)


def find_missing_tools(
    required: Sequence[str] = REQUIRED_TOOLS,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> list[str]:
    """Return the required tools that are not on PATH."""
    return [tool for tool in required if which(tool) is None]


def install_hint(
    packages: str = "procps",
    which: Callable[[str], Optional[str]] = shutil.which,
) -> str:
    """Suggest an install command for the detected package manager."""
    for manager, template in _INSTALL_HINTS:
        if which(manager):
            return "Try: " + template.format(packages=packages)
    return ""


def check_prerequisites(
    required: Sequence[str] = REQUIRED_TOOLS,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> None:
    """
    Verify that all required external utilities are available.

    Raises:
        PrerequisiteError: Listing every missing tool
    """
    missing = find_missing_tools(required, which)
    if missing:
        raise PrerequisiteError(missing, hint=install_hint(which=which))
    logger.debug(f"Prerequisites satisfied: {', '.join(required)}")


__all__ = [
    "REQUIRED_TOOLS",
    "find_missing_tools",
    "install_hint",
    "check_prerequisites",
]
