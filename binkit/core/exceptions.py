"""
Centralized exception hierarchy for binkit.

Tool-scoped errors carry a short ``reason`` that ends up in the
``Failed(reason)`` outcome for that tool. Everything else is fatal for the
whole run and is raised before any tool is processed.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class BinkitError(Exception):
    """Base exception for all binkit errors."""

    pass


# ============================================================================
# Run-fatal Exceptions
# ============================================================================


class ConfigError(BinkitError):
    """Catalog file is missing, unreadable or malformed."""

    pass


class PrerequisiteError(BinkitError):
    """Required external utilities are missing."""

    def __init__(self, missing: list[str], hint: str = ""):
        self.missing = list(missing)
        self.hint = hint
        msg = f"Missing required tools: {', '.join(self.missing)}"
        if hint:
            msg += f" ({hint})"
        super().__init__(msg)


# ============================================================================
# Tool-scoped Exceptions
# ============================================================================


class ToolError(BinkitError):
    """Base exception for failures that only affect a single tool."""

    reason = "failed"

    def __init__(self, message: str = "", reason: str = ""):
        if reason:
            self.reason = reason
        super().__init__(message or self.reason)


class InvalidConfigurationError(ToolError):
    """Tool definition is missing required fields or has unknown ones."""

    reason = "invalid configuration"


class UnsupportedArchitectureError(ToolError):
    """Host CPU architecture has no canonical token."""

    reason = "unsupported architecture"

    def __init__(self, arch: str):
        self.arch = arch
        super().__init__(f"Unsupported architecture: {arch}")


class RemoteVersionUnavailableError(ToolError):
    """Latest release could not be determined from GitHub."""

    reason = "latest version unavailable"


class DownloadFailedError(ToolError):
    """Release artifact could not be downloaded."""

    reason = "download failed"


class ExtractFailedError(ToolError):
    """Downloaded archive could not be extracted."""

    reason = "extract failed"


class BinaryNotFoundError(ToolError):
    """Executable was not found in the extracted artifact."""

    reason = "binary not found"


class InstallationFailedError(ToolError):
    """Executable could not be moved into the install directory."""

    reason = "installation failed"


class RemovalFailedError(ToolError):
    """Installed executable could not be removed."""

    reason = "removal failed"


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
]
