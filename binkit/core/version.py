"""
Version string handling.

Upstream tools print versions in many shapes ("jq-1.7.1", "v0.45.0",
"ripgrep 14.1.0"). Versions are compared as plain normalized strings: no
semantic ordering is attempted, two versions are equal iff their normalized
forms are equal.

Usage:
    from binkit.core.version import normalize_version, RegexVersionExtractor

    normalize_version("v1.2.3")  # '1.2.3'
    RegexVersionExtractor().extract(r"\\d+\\.\\d+\\.\\d+", "tool 1.2.3")  # '1.2.3'
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_VERSION_PATTERN = r"\d+\.\d+\.\d+"

# PCRE "keep out" marker as used by `grep -oP`
_PCRE_KEEP = "\\K"


def normalize_version(raw: str) -> str:
    """
    Strip a single leading 'v' or 'V' from a version string.

    Args:
        raw: Version as printed by a tool or used as a release tag

    Returns:
        Normalized version

    Example:
        >>> normalize_version("v1.2.3")
        '1.2.3'
        >>> normalize_version("1.2.3")
        '1.2.3'
    """
    if raw[:1] in ("v", "V"):
        return raw[1:]
    return raw


class VersionExtractor(ABC):
    """Extracts a version substring from command output using a pattern."""

    @abstractmethod
    def extract(self, pattern: str, text: str) -> Optional[str]:
        """
        Return the first version found in text, or None.

        Args:
            pattern: Pattern in the extractor's dialect
            text: Output of the tool's version command
        """
        pass


class RegexVersionExtractor(VersionExtractor):
    """
    Version extractor backed by Python's ``re`` module.

    Patterns are written for ``grep -oP``, so two PCRE conveniences are
    accepted: ``prefix\\Kversion`` (only the part after ``\\K`` is returned)
    and a named group ``(?P<version>...)``. Otherwise the whole first match
    is returned.
    """

    def extract(self, pattern: str, text: str) -> Optional[str]:
        try:
            compiled = re.compile(self._translate(pattern), re.MULTILINE)
        except re.error as e:
            logger.warning(f"Invalid version pattern {pattern!r}: {e}")
            return None

        match = compiled.search(text)
        if match is None:
            return None

        if "version" in compiled.groupindex:
            return match.group("version")
        return match.group(0)

    @staticmethod
    def _translate(pattern: str) -> str:
        """Rewrite 'prefix\\Krest' as '(?:prefix)(?P<version>rest)'."""
        index = pattern.find(_PCRE_KEEP)
        if index < 0:
            return pattern
        prefix = pattern[:index]
        rest = pattern[index + len(_PCRE_KEEP):]
        return f"(?:{prefix})(?P<version>{rest})"


__all__ = [
    "DEFAULT_VERSION_PATTERN",
    "normalize_version",
    "VersionExtractor",
    "RegexVersionExtractor",
]
