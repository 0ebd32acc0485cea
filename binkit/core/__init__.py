"""
Core functionality for binkit.

This package contains the foundational modules that the installer pipeline
depends on: version handling, host architecture, HTTP, archives and process
control.
"""

from .exceptions import (
    BinkitError,
    ConfigError,
    PrerequisiteError,
    ToolError,
    InvalidConfigurationError,
    UnsupportedArchitectureError,
    RemoteVersionUnavailableError,
    DownloadFailedError,
    ExtractFailedError,
    BinaryNotFoundError,
    InstallationFailedError,
    RemovalFailedError,
)

from .version import (
    normalize_version,
    VersionExtractor,
    RegexVersionExtractor,
)

from .platform import (
    resolve_architecture,
    clear_platform_cache,
)

from .github import (
    GitHubClient,
    release_download_url,
)

from .process import (
    ProcessTerminator,
    TerminationResult,
)

__all__ = [
    "BinkitError",
    "ConfigError",
    "PrerequisiteError",
    "ToolError",
    "InvalidConfigurationError",
    "UnsupportedArchitectureError",
    "RemoteVersionUnavailableError",
    "DownloadFailedError",
    "ExtractFailedError",
    "BinaryNotFoundError",
    "InstallationFailedError",
    "RemovalFailedError",
    "normalize_version",
    "VersionExtractor",
    "RegexVersionExtractor",
    "resolve_architecture",
    "clear_platform_cache",
    "GitHubClient",
    "release_download_url",
    "ProcessTerminator",
    "TerminationResult",
]
