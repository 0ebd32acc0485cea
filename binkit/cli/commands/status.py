"""
Status command implementation.

Shows installed and latest versions for every catalog tool.
"""

import logging

from binkit.cli.utils import build_context, format_table
from binkit.tools.state import InstallationState, ToolStatus

logger = logging.getLogger(__name__)

_STATUS_LABELS = {
    ToolStatus.NOT_INSTALLED: "Available",
    ToolStatus.UP_TO_DATE: "Up to date",
    ToolStatus.OUTDATED: "Outdated",
    ToolStatus.UNKNOWN: "GitHub API error",
    ToolStatus.INVALID: "Invalid config",
}


def _installed_column(state: InstallationState) -> str:
    if state.installed_version:
        return state.installed_version
    if state.installed_path:
        return "unknown"
    return "-"


def _status_column(state: InstallationState) -> str:
    if state.status is ToolStatus.NOT_INSTALLED and state.installed_path:
        return "Installed (version unknown)"
    if state.status is ToolStatus.NOT_INSTALLED and state.latest_error:
        return "GitHub API error"
    return _STATUS_LABELS[state.status]


def run(args) -> int:
    """
    Run the status command.

    Returns:
        Exit code (0 for success)
    """
    context = build_context(args)
    states = context.inspector.inspect_catalog(context.catalog)

    if not states:
        print(f"No tools defined in {context.catalog.source}")
        return 0

    rows = [
        [
            state.name,
            _installed_column(state),
            state.latest_version or "-",
            _status_column(state),
        ]
        for state in states
    ]
    print(format_table(["TOOL", "INSTALLED", "LATEST", "STATUS"], rows))

    outdated = sum(1 for state in states if state.is_outdated)
    if outdated:
        print()
        print(f"{outdated} tool(s) can be upgraded; run 'binkit upgrade'")

    return 0
