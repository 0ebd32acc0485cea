"""
Unit tests for installed-vs-latest state inspection.
"""

from pathlib import Path
from unittest.mock import Mock

import pytest

from binkit.core.exceptions import RemoteVersionUnavailableError
from binkit.tools.probe import ProbeResult
from binkit.tools.state import InstallationState, StateInspector, ToolStatus


class TestInstallationState:
    """Test InstallationState.status."""

    @pytest.mark.parametrize(
        "kwargs,status",
        [
            ({}, ToolStatus.NOT_INSTALLED),
            ({"installed_path": Path("/bin/t")}, ToolStatus.NOT_INSTALLED),
            ({"installed_version": "1.0", "latest_version": "1.0"}, ToolStatus.UP_TO_DATE),
            ({"installed_version": "1.0", "latest_version": "1.1"}, ToolStatus.OUTDATED),
            ({"installed_version": "1.0"}, ToolStatus.UNKNOWN),
            ({"invalid": True}, ToolStatus.INVALID),
        ],
    )
    def test_status(self, kwargs, status):
        assert InstallationState(name="t", **kwargs).status is status

    def test_newer_local_version_counts_as_outdated(self):
        """Test versions are compared for equality only."""
        state = InstallationState(name="t", installed_version="2.0", latest_version="1.9")
        assert state.is_outdated is True


class TestStateInspector:
    """Test StateInspector."""

    @pytest.fixture
    def github(self):
        return Mock()

    @pytest.fixture
    def probe(self):
        return Mock()

    def test_inspect(self, github, probe, make_definition):
        probe.probe.return_value = ProbeResult(Path("/bin/tool"), "1.0.0")
        github.latest_version.return_value = "1.1.0"

        state = StateInspector(github, probe).inspect(make_definition("tool"))

        assert state.installed_path == Path("/bin/tool")
        assert state.installed_version == "1.0.0"
        assert state.latest_version == "1.1.0"
        assert state.status is ToolStatus.OUTDATED
        github.latest_version.assert_called_once_with("owner/tool")

    def test_remote_failure_recorded(self, github, probe, make_definition):
        """Test remote errors are captured instead of raised."""
        probe.probe.return_value = None
        github.latest_version.side_effect = RemoteVersionUnavailableError("rate limited")

        state = StateInspector(github, probe).inspect(make_definition("tool"))

        assert state.latest_version is None
        assert state.latest_error == "rate limited"

    def test_skip_latest(self, github, probe, make_definition):
        probe.probe.return_value = None

        StateInspector(github, probe).inspect(make_definition("tool"), check_latest=False)

        github.latest_version.assert_not_called()

    def test_inspect_catalog(self, github, probe, catalog):
        """Test every catalog entry is inspected in order; invalid ones flagged."""
        probe.probe.return_value = None
        github.latest_version.return_value = "1.0.0"

        states = StateInspector(github, probe).inspect_catalog(catalog)

        assert [s.name for s in states] == ["alpha", "broken", "beta"]
        assert states[1].status is ToolStatus.INVALID
        assert github.latest_version.call_count == 2
