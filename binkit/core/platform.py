"""
Host architecture detection for binkit.

Release artifacts on GitHub are usually named after Go-style architecture
tokens (``amd64``, ``arm64``, ``arm``, ``386``). This module maps the kernel's
machine identifier (``uname -m``) onto those tokens.

Usage:
    from binkit.core.platform import resolve_architecture

    arch = resolve_architecture()          # host, e.g. 'amd64'
    arch = resolve_architecture("aarch64")  # 'arm64'
"""

import functools
import platform
from typing import Optional

from binkit.core.exceptions import UnsupportedArchitectureError

ARCH_MAP = {
    "x86_64": "amd64",
    "aarch64": "arm64",
    "armv7l": "arm",
    "i386": "386",
    "i686": "386",
}


@functools.lru_cache(maxsize=1)
def detect_machine() -> str:
    """
    Detect the host machine identifier.

    This function is cached - it only runs detection once per process.

    Returns:
        Raw machine string as reported by the kernel (e.g. 'x86_64')
    """
    return platform.machine()


def resolve_architecture(host_arch: Optional[str] = None) -> str:
    """
    Map a host machine identifier to a canonical architecture token.

    Args:
        host_arch: Machine identifier. If None, detects the current host.

    Returns:
        One of 'amd64', 'arm64', 'arm', '386'

    Raises:
        UnsupportedArchitectureError: If the identifier has no mapping

    Example:
        >>> resolve_architecture("x86_64")
        'amd64'
    """
    if host_arch is None:
        host_arch = detect_machine()

    try:
        return ARCH_MAP[host_arch]
    except KeyError:
        raise UnsupportedArchitectureError(host_arch) from None


def clear_platform_cache():
    """
    Clear the machine detection cache.

    Useful for testing.
    """
    detect_machine.cache_clear()


__all__ = [
    "ARCH_MAP",
    "detect_machine",
    "resolve_architecture",
    "clear_platform_cache",
]
