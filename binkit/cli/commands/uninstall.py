"""
Uninstall command implementation.

Removes named tools (or every installed catalog tool) from the system.
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
    SYMBOL_INFO,
)

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the uninstall command.

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

    if args.tools and not check_known_tools(context.catalog, args.tools):
        return 1

    ensure_prerequisites(dry_run=args.dry_run)

    if args.all:
        print("All installed tools will be removed.")
    else:
        print("The following tools will be removed:")
        for name in args.tools:
            print(f"  {name}")

    if not args.dry_run and not args.yes:
        if not confirm():
            print("Uninstall cancelled")
            return 0

    if args.all:
        summary = context.orchestrator.uninstall_all(
            dry_run=args.dry_run, progress=print_progress
        )
    else:
        summary = context.orchestrator.uninstall(
            args.tools, dry_run=args.dry_run, progress=print_progress
        )

    if len(summary) == 0:
        safe_print(f"{SYMBOL_INFO} No installed tools found")
        return 0

    safe_print(render_summary(summary, removal=True))
    return 1 if summary.has_failures else 0
