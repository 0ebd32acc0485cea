"""
binkit CLI argument parser.

This module implements the command-line interface for binkit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from binkit.core.exceptions import BinkitError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("binkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


class CLI:
    """binkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="binkit",
            description="binkit - install prebuilt tools from GitHub Releases",
            epilog='Use "binkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"binkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to tool catalog (default: ./binkit.yaml)",
        )
        parser.add_argument(
            "--path",
            type=Path,
            metavar="DIR",
            help="Installation directory (default: /usr/local/bin, usually needs root)",
        )
        parser.add_argument(
            "--token",
            metavar="TOKEN",
            help="GitHub token for API requests (default: $GITHUB_TOKEN)",
        )
        parser.add_argument(
            "--timeout",
            type=_positive_float,
            metavar="SECONDS",
            help="Network timeout in seconds (default: 30)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_list_command(subparsers)
        self._add_status_command(subparsers)
        self._add_install_command(subparsers)
        self._add_upgrade_command(subparsers)
        self._add_uninstall_command(subparsers)

        return parser

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        subparsers.add_parser(
            "list",
            help="List available tools",
            description="List the tools defined in the catalog",
        )

    def _add_status_command(self, subparsers):
        """Add 'status' subcommand."""
        subparsers.add_parser(
            "status",
            help="Show installed and latest versions",
            description="Compare installed versions with the latest GitHub releases",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install or update tools",
            description="Install tools, or update them to the latest release",
        )
        parser.add_argument("tools", nargs="*", metavar="TOOL", help="Tools to install")
        parser.add_argument("--all", action="store_true", help="Install all tools")
        parser.add_argument(
            "--force",
            action="store_true",
            help="Reinstall installed tools even when up to date",
        )
        self._add_common_mutation_args(parser)

    def _add_upgrade_command(self, subparsers):
        """Add 'upgrade' subcommand."""
        parser = subparsers.add_parser(
            "upgrade",
            help="Upgrade installed tools",
            description="Upgrade installed tools that are behind their latest release",
        )
        self._add_common_mutation_args(parser)

    def _add_uninstall_command(self, subparsers):
        """Add 'uninstall' subcommand."""
        parser = subparsers.add_parser(
            "uninstall",
            help="Remove installed tools",
            description="Remove installed tools from the system",
        )
        parser.add_argument("tools", nargs="*", metavar="TOOL", help="Tools to remove")
        parser.add_argument(
            "--all", action="store_true", help="Remove all installed tools"
        )
        self._add_common_mutation_args(parser)

    def _add_common_mutation_args(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be done without changing anything",
        )
        parser.add_argument(
            "--yes", "-y", action="store_true", help="Do not ask for confirmation"
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            print("\nOperation cancelled by user", file=sys.stderr)
            return 130  # Standard exit code for SIGINT
        except BinkitError as e:
            from binkit.cli.utils import print_error

            print_error(str(e))
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.WARNING
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "list": "binkit.cli.commands.list_tools",
            "status": "binkit.cli.commands.status",
            "install": "binkit.cli.commands.install",
            "upgrade": "binkit.cli.commands.upgrade",
            "uninstall": "binkit.cli.commands.uninstall",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
