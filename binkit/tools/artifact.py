"""
Release artifact resolution.

Expands ``%VERSION%`` and ``%ARCH%`` in a tool's archive and binary-path
templates. The archive name gets the bare version (``tool_1.2.3_...``) while
the in-archive binary path gets a 'v'-prefixed version, matching how most
projects name the directory inside their archives (``tool-v1.2.3-.../tool``).
"""

from dataclasses import dataclass

from binkit.config.catalog import ToolDefinition
from binkit.core.github import release_download_url

VERSION_PLACEHOLDER = "%VERSION%"
ARCH_PLACEHOLDER = "%ARCH%"
WILDCARD = "*"


def resolve_archive_name(pattern: str, version: str, arch: str) -> str:
    """
    Expand an archive file name template.

    Example:
        >>> resolve_archive_name("tool_%VERSION%_linux_%ARCH%.tar.gz", "1.2.3", "amd64")
        'tool_1.2.3_linux_amd64.tar.gz'
    """
    return pattern.replace(ARCH_PLACEHOLDER, arch).replace(VERSION_PLACEHOLDER, version)


def resolve_binary_path(pattern: str, version: str, arch: str) -> str:
    """
    Expand an in-archive binary path template.

    The version is always inserted with a single 'v' prefix; a template that
    already spells the prefix ('tool-v%VERSION%') does not get a second one.

    Example:
        >>> resolve_binary_path("tool-%VERSION%-linux-%ARCH%/tool", "1.2.3", "amd64")
        'tool-v1.2.3-linux-amd64/tool'
        >>> resolve_binary_path("tool-v%VERSION%-linux-amd64/tool", "1.2.3", "amd64")
        'tool-v1.2.3-linux-amd64/tool'
    """
    tagged = f"v{version}"
    return (
        pattern.replace(ARCH_PLACEHOLDER, arch)
        .replace(f"v{VERSION_PLACEHOLDER}", tagged)
        .replace(VERSION_PLACEHOLDER, tagged)
    )


def has_wildcard(binary_path: str) -> bool:
    return WILDCARD in binary_path


@dataclass(frozen=True)
class Artifact:
    """Concrete download target for one tool release."""

    archive_name: str
    binary_path: str
    url: str
    version: str
    arch: str


def resolve_artifact(definition: ToolDefinition, version: str, arch: str) -> Artifact:
    """Compute archive name, binary path and download URL for a release."""
    archive_name = resolve_archive_name(definition.archive_pattern, version, arch)
    return Artifact(
        archive_name=archive_name,
        binary_path=resolve_binary_path(definition.binary_path, version, arch),
        url=release_download_url(definition.repository, version, archive_name),
        version=version,
        arch=arch,
    )


__all__ = [
    "VERSION_PLACEHOLDER",
    "ARCH_PLACEHOLDER",
    "resolve_archive_name",
    "resolve_binary_path",
    "has_wildcard",
    "Artifact",
    "resolve_artifact",
]
