"""
Unit tests for bulk orchestration.
"""

from pathlib import Path
from unittest.mock import Mock, call

import pytest

from binkit.tools.orchestrator import BulkOrchestrator
from binkit.tools.outcome import Outcome, OutcomeKind
from binkit.tools.probe import ProbeResult
from binkit.tools.state import InstallationState


@pytest.fixture
def installer():
    installer = Mock()
    installer.install.side_effect = lambda definition, force=False, dry_run=False: (
        Outcome.installed(definition.name, "1.0.0", Path("/bin") / definition.name)
    )
    return installer


@pytest.fixture
def uninstaller():
    uninstaller = Mock()
    uninstaller.uninstall.side_effect = lambda definition, dry_run=False: Outcome.removed(
        definition.name, Path("/bin") / definition.name
    )
    return uninstaller


@pytest.fixture
def inspector():
    return Mock()


@pytest.fixture
def orchestrator(catalog, installer, uninstaller, inspector):
    return BulkOrchestrator(catalog, installer, uninstaller, inspector)


class TestInstall:
    """Test BulkOrchestrator.install()."""

    def test_one_outcome_per_name_in_order(self, orchestrator):
        """Test every requested name yields exactly one outcome, in order."""
        summary = orchestrator.install(["beta", "missing", "broken", "alpha"])

        assert [o.tool for o in summary] == ["beta", "missing", "broken", "alpha"]
        assert summary.get("missing").kind is OutcomeKind.FAILED
        assert summary.get("missing").reason == "invalid configuration"
        assert summary.get("broken").reason == "invalid configuration"

    def test_invalid_never_reaches_installer(self, orchestrator, installer):
        orchestrator.install(["broken", "missing"])

        installer.install.assert_not_called()

    def test_flags_passed_through(self, orchestrator, installer, catalog):
        orchestrator.install(["alpha"], force=True, dry_run=True)

        installer.install.assert_called_once_with(catalog.get("alpha"), force=True, dry_run=True)

    def test_failure_does_not_stop_run(self, orchestrator, installer):
        """Test later tools are processed after a failure."""
        installer.install.side_effect = [
            Outcome.failed("alpha", "download failed"),
            Outcome.installed("beta", "2.0", Path("/bin/beta")),
        ]

        summary = orchestrator.install(["alpha", "beta"])

        assert [o.kind for o in summary] == [OutcomeKind.FAILED, OutcomeKind.INSTALLED]
        assert summary.has_failures

    def test_unexpected_error_does_not_stop_run(self, orchestrator, installer):
        """Test an unexpected exception becomes a failure for that tool only."""
        installer.install.side_effect = [
            RuntimeError("boom"),
            Outcome.installed("beta", "2.0", Path("/bin/beta")),
        ]

        summary = orchestrator.install(["alpha", "beta"])

        assert [o.kind for o in summary] == [OutcomeKind.FAILED, OutcomeKind.INSTALLED]
        assert summary.get("alpha").reason == "unexpected error"


    def test_progress(self, orchestrator):
        """Test progress receives 1-based positions and the total."""
        progress = Mock()

        orchestrator.install(["alpha", "missing", "beta"], progress=progress)

        assert progress.call_args_list == [
            call(1, 3, "alpha"),
            call(2, 3, "missing"),
            call(3, 3, "beta"),
        ]

    def test_install_all(self, orchestrator):
        """Test install_all covers the catalog in order, invalid records included."""
        summary = orchestrator.install_all()

        assert [o.tool for o in summary] == ["alpha", "broken", "beta"]
        assert summary.get("broken").kind is OutcomeKind.FAILED


class TestUpgrade:
    """Test find_outdated() and upgrade_installed()."""

    def _states(self, inspector, states):
        by_name = {state.name: state for state in states}
        inspector.inspect.side_effect = lambda definition: by_name[definition.name]

    def test_find_outdated(self, orchestrator, inspector):
        self._states(
            inspector,
            [
                InstallationState("alpha", Path("/bin/alpha"), "1.0", "1.1"),
                InstallationState("beta", Path("/bin/beta"), "2.0", "2.0"),
            ],
        )

        assert [s.name for s in orchestrator.find_outdated()] == ["alpha"]

    def test_remote_failures_skipped(self, orchestrator, inspector):
        """Test tools whose latest version is unknown are left out."""
        self._states(
            inspector,
            [
                InstallationState("alpha", Path("/bin/alpha"), "1.0", None, "rate limited"),
                InstallationState("beta", Path("/bin/beta"), "2.0", "2.1"),
            ],
        )

        assert [s.name for s in orchestrator.find_outdated()] == ["beta"]

    def test_not_installed_ignored(self, orchestrator, inspector):
        self._states(
            inspector,
            [
                InstallationState("alpha", None, None, "1.1"),
                InstallationState("beta", Path("/bin/beta"), None, "2.1"),
            ],
        )

        assert orchestrator.find_outdated() == []

    def test_upgrade_installed(self, orchestrator, inspector, installer, catalog):
        """Test only outdated tools are installed, never forced."""
        self._states(
            inspector,
            [
                InstallationState("alpha", Path("/bin/alpha"), "1.0", "1.0"),
                InstallationState("beta", Path("/bin/beta"), "2.0", "2.1"),
            ],
        )

        summary = orchestrator.upgrade_installed(dry_run=True)

        assert [o.tool for o in summary] == ["beta"]
        installer.install.assert_called_once_with(catalog.get("beta"), force=False, dry_run=True)

    def test_upgrade_precomputed_states(self, orchestrator, inspector, installer, catalog):
        """Test states from an earlier lookup are not inspected again."""
        outdated = [InstallationState("alpha", Path("/bin/alpha"), "1.0", "1.1")]

        summary = orchestrator.upgrade_installed(outdated)

        assert [o.tool for o in summary] == ["alpha"]
        inspector.inspect.assert_not_called()
        installer.install.assert_called_once_with(catalog.get("alpha"), force=False, dry_run=False)

    def test_nothing_to_upgrade(self, orchestrator, inspector, installer):

        self._states(
            inspector,
            [
                InstallationState("alpha", Path("/bin/alpha"), "1.0", "1.0"),
                InstallationState("beta"),
            ],
        )

        assert len(orchestrator.upgrade_installed()) == 0
        installer.install.assert_not_called()


class TestUninstall:
    """Test uninstall() and uninstall_all()."""

    def test_uninstall_names(self, orchestrator, uninstaller):
        summary = orchestrator.uninstall(["alpha", "missing"], dry_run=True)

        assert [o.kind for o in summary] == [OutcomeKind.REMOVED, OutcomeKind.FAILED]
        uninstaller.uninstall.assert_called_once()
        assert uninstaller.uninstall.call_args.kwargs == {"dry_run": True}

    def test_uninstall_all_filters_installed(self, orchestrator, uninstaller):
        """Test uninstall_all only visits tools found on PATH."""
        uninstaller.probe.probe.side_effect = lambda definition: (
            ProbeResult(Path("/bin/beta"), "1.0") if definition.name == "beta" else None
        )

        summary = orchestrator.uninstall_all()

        assert [o.tool for o in summary] == ["beta"]
