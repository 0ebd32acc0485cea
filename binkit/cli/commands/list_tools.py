"""
List command implementation.

Prints every catalog tool with its description.
"""

import logging

from binkit.cli.utils import load_catalog, load_settings, safe_print, SYMBOL_WARN

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list command.

    Returns:
        Exit code (0 for success)
    """
    catalog = load_catalog(load_settings(args))

    if not len(catalog):
        print(f"No tools defined in {catalog.source}")
        return 0

    width = max(len(name) for name in catalog.names())

    print("Available tools:")
    for name in catalog.names():
        if catalog.is_valid(name):
            print(f"  {name.ljust(width)}  {catalog.description(name)}")
        else:
            safe_print(f"  {name.ljust(width)}  {SYMBOL_WARN} {catalog.error(name)}")

    return 0
