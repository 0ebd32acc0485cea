"""
Shared utilities for CLI commands.

Loading the catalog, wiring the pipeline together, prompting and rendering
outcomes are the same for every command and live here.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

from binkit.config.catalog import ToolCatalog
from binkit.config.parser import parse_catalog
from binkit.config.settings import Settings, discover_config_path
from binkit.core.github import GitHubClient
from binkit.core.prerequisites import check_prerequisites
from binkit.core.process import ProcessTerminator
from binkit.tools.fetcher import ArtifactFetcher
from binkit.tools.installer import Installer
from binkit.tools.orchestrator import BulkOrchestrator
from binkit.tools.outcome import PERMISSION_DENIED, OutcomeKind, RunSummary
from binkit.tools.probe import LocalVersionProbe
from binkit.tools.state import StateInspector
from binkit.tools.uninstaller import Uninstaller

logger = logging.getLogger(__name__)

SYMBOL_OK = "✓"
SYMBOL_FAIL = "✗"
SYMBOL_WARN = "⚠"
SYMBOL_INFO = "ℹ"


# ============================================================================
# Configuration Management
# ============================================================================


def load_settings(args) -> Settings:
    """
    Resolve settings from global CLI flags and the environment.

    Raises:
        ConfigError: If an environment value is malformed
    """
    return Settings.from_environment(
        config_path=getattr(args, "config", None),
        install_path=getattr(args, "path", None),
        github_token=getattr(args, "token", None),
        timeout=getattr(args, "timeout", None),
    )


def load_catalog(settings: Settings) -> ToolCatalog:
    """
    Locate and parse the catalog file.

    Raises:
        ConfigError: If no catalog is found or it cannot be parsed
    """
    config_path = discover_config_path(settings.config_path)
    logger.debug(f"Loading catalog from {config_path}")
    catalog = parse_catalog(config_path)
    logger.debug(f"Loaded {len(catalog)} tool(s)")
    return catalog


@dataclass
class Context:
    """Everything a command needs to talk to the pipeline."""

    settings: Settings
    catalog: ToolCatalog
    orchestrator: BulkOrchestrator

    @property
    def inspector(self) -> StateInspector:
        return self.orchestrator.inspector


def build_context(args) -> Context:
    """
    Load settings and catalog, and wire installer, uninstaller and
    state inspector around one shared HTTP session.

    Raises:
        ConfigError: If settings or the catalog cannot be loaded
    """
    settings = load_settings(args)
    catalog = load_catalog(settings)

    github = GitHubClient(token=settings.github_token, timeout=settings.timeout)
    probe = LocalVersionProbe()
    terminator = ProcessTerminator(grace_period=settings.grace_period)
    installer = Installer(
        settings=settings,
        github=github,
        probe=probe,
        fetcher=ArtifactFetcher(session=github.session, timeout=settings.timeout),
        terminator=terminator,
    )
    orchestrator = BulkOrchestrator(
        catalog,
        installer,
        uninstaller=Uninstaller(probe=probe, terminator=terminator),
        inspector=StateInspector(github=github, probe=probe),
    )
    return Context(settings=settings, catalog=catalog, orchestrator=orchestrator)


def ensure_prerequisites(dry_run: bool = False) -> None:
    """
    Check external utilities needed for mutating commands.

    Dry runs never touch processes, so nothing is required.

    Raises:
        PrerequisiteError: If pgrep/pkill are missing
    """
    if not dry_run:
        check_prerequisites()


def check_known_tools(catalog: ToolCatalog, names: Sequence[str]) -> bool:
    """Report unknown tool names; returns True when all are known."""
    unknown = catalog.unknown(names)
    if not unknown:
        return True
    print_error(
        f"Unknown tool(s): {', '.join(unknown)}",
        "Use 'binkit list' to see available tools",
    )
    return False


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    safe_print(f"{SYMBOL_FAIL} {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    safe_print(f"{SYMBOL_WARN} {message}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message, falling back to ASCII markers when the console encoding
    cannot represent the status symbols.
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = (
            message.replace(SYMBOL_OK, "[OK]")
            .replace(SYMBOL_FAIL, "[FAILED]")
            .replace(SYMBOL_WARN, "WARNING:")
            .replace(SYMBOL_INFO, "[INFO]")
        )
        print(safe_message, file=file)


def confirm(prompt: str = "Continue? [y/N] ") -> bool:
    """Ask for confirmation; anything but y/yes (or EOF) declines."""
    try:
        response = input(prompt).strip().lower()
    except (EOFError, KeyboardInterrupt):
        print()
        return False
    return response in ("y", "yes")


def print_progress(position: int, total: int, name: str):
    """Per-tool progress line, e.g. '[2/5] jq'."""
    print(f"[{position}/{total}] {name}")


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Left-aligned plain-text table."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def line(cells):
        return "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip()

    lines = [line(headers), line(["-" * w for w in widths])]
    lines.extend(line(row) for row in rows)
    return "\n".join(lines)


def render_summary(summary: RunSummary, removal: bool = False) -> str:
    """
    Format a run summary grouped by outcome.

    Args:
        summary: Outcomes of one run
        removal: Add the 'N removed, M skipped' tally used by uninstall
    """
    lines = ["", "Summary:"]

    sections = (
        ("Successfully installed", (OutcomeKind.INSTALLED, OutcomeKind.FORCE_REINSTALLED), SYMBOL_OK),
        ("Removed", (OutcomeKind.REMOVED,), SYMBOL_OK),
        ("Would do (dry run)", (OutcomeKind.PLANNED,), SYMBOL_INFO),
        ("Skipped", (OutcomeKind.SKIPPED,), SYMBOL_INFO),
        ("Failed", (OutcomeKind.FAILED,), SYMBOL_FAIL),
    )

    for title, kinds, symbol in sections:
        outcomes = summary.of_kind(*kinds)
        if not outcomes:
            continue
        lines.append(f"{title}:")
        for outcome in outcomes:
            lines.append(f"  {symbol} {outcome.describe()}")
            if outcome.url:
                lines.append(f"      {outcome.url}")

    if len(summary) == 0:
        lines.append("  Nothing to do")

    if any(o.reason.endswith(PERMISSION_DENIED) for o in summary.failed):
        lines.append(
            "Hint: the install directory is not writable; "
            "run with sudo or choose another directory with --path"
        )

    if removal:
        removed = len(summary.of_kind(OutcomeKind.REMOVED))
        lines.append(f"{removed} removed, {len(summary.skipped)} skipped")

    return "\n".join(lines)
