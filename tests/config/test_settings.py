"""
Unit tests for runtime settings and catalog discovery.
"""

from pathlib import Path

import pytest

from binkit.config.settings import (
    DEFAULT_INSTALL_PATH,
    Settings,
    discover_config_path,
)
from binkit.core.exceptions import ConfigError


class TestSettingsFromEnvironment:
    """Test Settings.from_environment()."""

    def test_defaults(self):
        settings = Settings.from_environment({})

        assert settings.install_path == DEFAULT_INSTALL_PATH
        assert settings.config_path is None
        assert settings.github_token is None
        assert settings.timeout == 30

    def test_environment(self):
        settings = Settings.from_environment(
            {
                "BINKIT_CONFIG": "/etc/binkit.yaml",
                "BINKIT_INSTALL_PATH": "/opt/bin",
                "BINKIT_TIMEOUT": "5",
            }
        )

        assert settings.config_path == Path("/etc/binkit.yaml")
        assert settings.install_path == Path("/opt/bin")
        assert settings.timeout == 5.0

    @pytest.mark.parametrize(
        "environ,expected",
        [
            ({"GH_TOKEN": "c"}, "c"),
            ({"GITHUB_TOKEN": "b", "GH_TOKEN": "c"}, "b"),
            ({"BINKIT_GITHUB_TOKEN": "a", "GITHUB_TOKEN": "b"}, "a"),
        ],
    )
    def test_token_precedence(self, environ, expected):
        """Test the binkit-specific token variable wins."""
        assert Settings.from_environment(environ).github_token == expected

    def test_overrides_win(self):
        """Test explicit overrides beat the environment; None is ignored."""
        settings = Settings.from_environment(
            {"BINKIT_INSTALL_PATH": "/opt/bin", "GITHUB_TOKEN": "env"},
            install_path=Path("/custom"),
            github_token=None,
        )

        assert settings.install_path == Path("/custom")
        assert settings.github_token == "env"

    def test_unknown_override(self):
        with pytest.raises(TypeError, match="Unknown setting"):
            Settings.from_environment({}, colour=True)

    @pytest.mark.parametrize("value", ["soon", "0", "-1"])
    def test_bad_timeout(self, value):
        with pytest.raises(ConfigError):
            Settings.from_environment({"BINKIT_TIMEOUT": value})

    def test_token_not_in_repr(self):
        settings = Settings(github_token="secret")
        assert "secret" not in repr(settings)

    def test_target_path(self):
        settings = Settings(install_path=Path("/opt/bin"))
        assert settings.target_path("jq") == Path("/opt/bin/jq")


class TestDiscoverConfigPath:
    """Test discover_config_path()."""

    @pytest.fixture(autouse=True)
    def home(self, tmp_path, monkeypatch):
        home = tmp_path / "home"
        home.mkdir()
        monkeypatch.setenv("HOME", str(home))
        return home

    def test_explicit(self, tmp_path):
        """Test an explicit path is returned even if missing."""
        explicit = tmp_path / "custom.yaml"
        assert discover_config_path(explicit, cwd=tmp_path) == explicit

    def test_cwd_yaml_first(self, tmp_path):
        (tmp_path / "binkit.yaml").write_text("tools: {}\n")
        (tmp_path / "install_from_github.config").write_text("")

        assert discover_config_path(cwd=tmp_path) == tmp_path / "binkit.yaml"

    def test_cwd_legacy(self, tmp_path):
        (tmp_path / "install_from_github.config").write_text("")

        assert discover_config_path(cwd=tmp_path) == tmp_path / "install_from_github.config"

    def test_user_config(self, tmp_path, home):
        user_config = home / ".config" / "binkit" / "tools.yaml"
        user_config.parent.mkdir(parents=True)
        user_config.write_text("tools: {}\n")
        cwd = tmp_path / "empty"
        cwd.mkdir()

        assert discover_config_path(cwd=cwd) == user_config

    def test_nothing_found(self, tmp_path):
        cwd = tmp_path / "empty"
        cwd.mkdir()

        with pytest.raises(ConfigError, match="--config"):
            discover_config_path(cwd=cwd)
