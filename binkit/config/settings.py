"""
Runtime settings for binkit.

Settings come from (highest priority first) explicit overrides such as CLI
flags, environment variables, then defaults.

Environment variables:
    BINKIT_CONFIG         Catalog file path
    BINKIT_INSTALL_PATH   Directory executables are installed into
    BINKIT_GITHUB_TOKEN   GitHub token (falls back to GITHUB_TOKEN, GH_TOKEN)
    BINKIT_TIMEOUT        Network timeout in seconds
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Mapping, Optional

from binkit.core.download import DEFAULT_TIMEOUT
from binkit.core.exceptions import ConfigError
from binkit.core.process import DEFAULT_GRACE_PERIOD

logger = logging.getLogger(__name__)

DEFAULT_INSTALL_PATH = Path("/usr/local/bin")

CONFIG_FILE_NAMES = ("binkit.yaml", "binkit.yml", "install_from_github.config")
USER_CONFIG_PATH = Path("~/.config/binkit/tools.yaml")

TOKEN_VARIABLES = ("BINKIT_GITHUB_TOKEN", "GITHUB_TOKEN", "GH_TOKEN")


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one invocation."""

    config_path: Optional[Path] = None
    install_path: Path = DEFAULT_INSTALL_PATH
    github_token: Optional[str] = field(default=None, repr=False)
    timeout: float = DEFAULT_TIMEOUT
    grace_period: float = DEFAULT_GRACE_PERIOD

    @classmethod
    def from_environment(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides
    ) -> "Settings":
        """
        Build settings from environment variables and explicit overrides.

        Overrides whose value is None are ignored, so argparse namespaces can
        be passed through directly.

        Raises:
            ConfigError: If an environment value cannot be parsed
        """
        if environ is None:
            environ = os.environ

        values: dict = {}

        if environ.get("BINKIT_CONFIG"):
            values["config_path"] = Path(environ["BINKIT_CONFIG"]).expanduser()

        if environ.get("BINKIT_INSTALL_PATH"):
            values["install_path"] = Path(environ["BINKIT_INSTALL_PATH"]).expanduser()

        for variable in TOKEN_VARIABLES:
            if environ.get(variable):
                values["github_token"] = environ[variable]
                break

        if environ.get("BINKIT_TIMEOUT"):
            try:
                values["timeout"] = float(environ["BINKIT_TIMEOUT"])
            except ValueError as e:
                raise ConfigError(
                    f"BINKIT_TIMEOUT must be a number, got {environ['BINKIT_TIMEOUT']!r}"
                ) from e

        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Unknown setting: {key}")
            if value is not None:
                values[key] = value

        settings = cls(**values)
        if settings.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {settings.timeout}")
        return settings

    def target_path(self, application: str) -> Path:
        """Where an application's executable is installed."""
        return Path(self.install_path) / application


def discover_config_path(
    explicit: Optional[Path] = None, cwd: Optional[Path] = None
) -> Path:
    """
    Find the catalog file to use.

    Order: explicit path, then well-known names in the working directory,
    then ~/.config/binkit/tools.yaml.

    Raises:
        ConfigError: If no catalog file can be found
    """
    if explicit is not None:
        return Path(explicit).expanduser()

    cwd = cwd or Path.cwd()
    candidates = [cwd / name for name in CONFIG_FILE_NAMES]
    candidates.append(USER_CONFIG_PATH.expanduser())

    for candidate in candidates:
        if candidate.is_file():
            logger.debug(f"Using config file {candidate}")
            return candidate

    searched = ", ".join(str(c) for c in candidates)
    raise ConfigError(
        f"Config file not found (searched: {searched}). "
        "Create one or use --config to specify a different location"
    )


__all__ = [
    "DEFAULT_INSTALL_PATH",
    "Settings",
    "discover_config_path",
]
