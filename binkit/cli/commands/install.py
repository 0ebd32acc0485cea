"""
Install command implementation.

Installs named tools (or the whole catalog), updating tools that are behind
their latest release.
"""

import logging

from binkit.cli.utils import (
    build_context,
    check_known_tools,
    confirm,
    ensure_prerequisites,
    print_error,
    print_progress,
    render_summary,
    safe_print,
)

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments with:
            - tools: Tool names
            - all: Install every catalog tool
            - force: Reinstall installed tools
            - dry_run: Only report what would be done
            - yes: Skip confirmation

    Returns:
        Exit code (0 for success, 1 if any tool failed)
    """
    if args.all and args.tools:
        print_error("Specify tool names or --all, not both")
        return 1
    if not args.all and not args.tools:
        print_error("Specify tool names or --all", "Use 'binkit list' to see available tools")
        return 1

    context = build_context(args)
    names = context.catalog.names() if args.all else list(args.tools)

    if not check_known_tools(context.catalog, names):
        return 1

    ensure_prerequisites(dry_run=args.dry_run)

    action = "force reinstalled" if args.force else "installed or updated"
    print(f"The following tools will be {action} in {context.settings.install_path}:")
    for name in names:
        print(f"  {name}")

    if not args.dry_run and not args.yes:
        if not confirm():
            print("Installation cancelled")
            return 0

    summary = context.orchestrator.install(
        names, force=args.force, dry_run=args.dry_run, progress=print_progress
    )
    safe_print(render_summary(summary))

    return 1 if summary.has_failures else 0
