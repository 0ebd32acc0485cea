"""
Upgrade command implementation.

Upgrades installed tools that are behind their latest release.
"""

import logging

from binkit.cli.utils import (
    build_context,
    confirm,
    ensure_prerequisites,
    print_progress,
    render_summary,
    safe_print,
    SYMBOL_OK,
)

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the upgrade command.

    Returns:
        Exit code (0 for success, 1 if any tool failed)
    """
    context = build_context(args)
    ensure_prerequisites(dry_run=args.dry_run)

    print("Checking installed tools for updates...")
    outdated = context.orchestrator.find_outdated()

    if not outdated:
        safe_print(f"{SYMBOL_OK} All installed tools are up to date")
        return 0

    print("The following tools will be upgraded:")
    for state in outdated:
        print(f"  {state.name}: {state.installed_version} -> {state.latest_version}")

    if not args.dry_run and not args.yes:
        if not confirm():
            print("Upgrade cancelled")
            return 0

    summary = context.orchestrator.upgrade_installed(
        outdated, dry_run=args.dry_run, progress=print_progress
    )
    safe_print(render_summary(summary))

    return 1 if summary.has_failures else 0
