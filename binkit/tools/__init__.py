"""
Tool installation pipeline.

Probing, artifact resolution, fetching, and the install/uninstall state
machines built on top of them, plus bulk orchestration over a catalog.
"""

from .outcome import (
    OutcomeKind,
    Outcome,
    RunSummary,
)
from .probe import LocalVersionProbe, ProbeResult
from .artifact import Artifact, resolve_artifact
from .fetcher import ArtifactFetcher, FetchedArtifact
from .installer import Installer
from .uninstaller import Uninstaller
from .state import InstallationState, StateInspector, ToolStatus
from .orchestrator import BulkOrchestrator

__all__ = [
    "OutcomeKind",
    "Outcome",
    "RunSummary",
    "LocalVersionProbe",
    "ProbeResult",
    "Artifact",
    "resolve_artifact",
    "ArtifactFetcher",
    "FetchedArtifact",
    "Installer",
    "Uninstaller",
    "InstallationState",
    "StateInspector",
    "ToolStatus",
    "BulkOrchestrator",
]
