"""
Per-tool results and the run summary built from them.

Outcomes are plain values: the pipeline never prints, the CLI renders them.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

# Skip reasons
REASON_UP_TO_DATE = "already up to date"
REASON_FORCE_NOT_INSTALLED = "not installed; force only affects installed tools"
REASON_NOT_INSTALLED = "not installed"

# Failure reasons not carried by an exception type
REASON_BINARY_NOT_IN_ARCHIVE = "binary not found in archive"
REASON_UNEXPECTED_ERROR = "unexpected error"

# Appended to a failure reason when the install directory is not writable
PERMISSION_DENIED = "permission denied"


class OutcomeKind(Enum):
    """Terminal state of one tool in a run."""

    INSTALLED = "installed"
    FORCE_REINSTALLED = "force reinstalled"
    REMOVED = "removed"
    PLANNED = "planned"
    SKIPPED = "skipped"
    FAILED = "failed"

    @property
    def succeeded(self) -> bool:
        return self in (
            OutcomeKind.INSTALLED,
            OutcomeKind.FORCE_REINSTALLED,
            OutcomeKind.REMOVED,
        )


@dataclass(frozen=True)
class Outcome:
    """Result of processing one tool."""

    tool: str
    kind: OutcomeKind
    reason: str = ""
    version: Optional[str] = None
    path: Optional[Path] = None
    url: Optional[str] = None

    @classmethod
    def installed(cls, tool: str, version: str, path: Path) -> "Outcome":
        return cls(tool, OutcomeKind.INSTALLED, version=version, path=path)

    @classmethod
    def force_reinstalled(cls, tool: str, version: str, path: Path) -> "Outcome":
        return cls(tool, OutcomeKind.FORCE_REINSTALLED, version=version, path=path)

    @classmethod
    def removed(cls, tool: str, path: Path) -> "Outcome":
        return cls(tool, OutcomeKind.REMOVED, path=path)

    @classmethod
    def planned(
        cls,
        tool: str,
        reason: str,
        version: Optional[str] = None,
        path: Optional[Path] = None,
        url: Optional[str] = None,
    ) -> "Outcome":
        return cls(tool, OutcomeKind.PLANNED, reason=reason, version=version, path=path, url=url)

    @classmethod
    def skipped(cls, tool: str, reason: str, version: Optional[str] = None) -> "Outcome":
        return cls(tool, OutcomeKind.SKIPPED, reason=reason, version=version)

    @classmethod
    def failed(cls, tool: str, reason: str) -> "Outcome":
        return cls(tool, OutcomeKind.FAILED, reason=reason)

    def describe(self) -> str:
        """One-line human description, e.g. 'jq: 1.7.1 (force reinstalled)'."""
        if self.kind is OutcomeKind.INSTALLED:
            return f"{self.tool}: {self.version}"
        if self.kind is OutcomeKind.FORCE_REINSTALLED:
            return f"{self.tool}: {self.version} (force reinstalled)"
        if self.kind is OutcomeKind.REMOVED:
            return f"{self.tool}: removed from {self.path}"
        return f"{self.tool}: {self.reason}"


@dataclass(frozen=True)
class RunSummary:
    """Ordered, immutable collection of outcomes for one run."""

    outcomes: tuple[Outcome, ...] = ()

    def add(self, outcome: Outcome) -> "RunSummary":
        """Return a new summary with outcome appended."""
        return RunSummary(self.outcomes + (outcome,))

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self):
        return iter(self.outcomes)

    def of_kind(self, *kinds: OutcomeKind) -> list[Outcome]:
        return [o for o in self.outcomes if o.kind in kinds]

    @property
    def succeeded(self) -> list[Outcome]:
        return [o for o in self.outcomes if o.kind.succeeded]

    @property
    def skipped(self) -> list[Outcome]:
        return self.of_kind(OutcomeKind.SKIPPED)

    @property
    def failed(self) -> list[Outcome]:
        return self.of_kind(OutcomeKind.FAILED)

    @property
    def planned(self) -> list[Outcome]:
        return self.of_kind(OutcomeKind.PLANNED)

    @property
    def has_failures(self) -> bool:
        return any(o.kind is OutcomeKind.FAILED for o in self.outcomes)

    def get(self, tool: str) -> Optional[Outcome]:
        """First outcome recorded for a tool, if any."""
        for outcome in self.outcomes:
            if outcome.tool == tool:
                return outcome
        return None


__all__ = [
    "REASON_UP_TO_DATE",
    "REASON_FORCE_NOT_INSTALLED",
    "REASON_NOT_INSTALLED",
    "REASON_BINARY_NOT_IN_ARCHIVE",
    "REASON_UNEXPECTED_ERROR",
    "PERMISSION_DENIED",
    "OutcomeKind",
    "Outcome",
    "RunSummary",
]
