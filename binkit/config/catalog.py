"""Tool definitions and the in-memory tool catalog."""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from binkit.core.exceptions import InvalidConfigurationError
from binkit.core.version import DEFAULT_VERSION_PATTERN

logger = logging.getLogger(__name__)

DEFAULT_VERSION_ARGS = ("--version",)


@dataclass(frozen=True)
class ToolDefinition:
    """Everything needed to install one tool from GitHub Releases."""

    name: str
    application: str
    repository: str  # 'owner/name'
    archive_pattern: str  # may contain %VERSION% / %ARCH%
    binary_path: str  # path inside the artifact, may contain placeholders and '*'
    description: str = ""
    version_args: tuple[str, ...] = ()
    version_pattern: str = ""

    @property
    def effective_version_args(self) -> tuple[str, ...]:
        """Arguments used to print the version, '--version' when unset."""
        return self.version_args or DEFAULT_VERSION_ARGS

    @property
    def effective_version_pattern(self) -> str:
        return self.version_pattern or DEFAULT_VERSION_PATTERN

    def validate(self) -> "ToolDefinition":
        """
        Check the definition invariants.

        Returns:
            self, for chaining

        Raises:
            InvalidConfigurationError: If a required field is empty or the
                repository is not of the form 'owner/name'
        """
        missing = [
            field_name
            for field_name in ("application", "repository", "archive_pattern", "binary_path")
            if not getattr(self, field_name)
        ]
        if missing:
            raise InvalidConfigurationError(
                f"Invalid configuration for tool {self.name}: "
                f"missing required fields: {', '.join(missing)}"
            )

        owner, _, repo = self.repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise InvalidConfigurationError(
                f"Invalid configuration for tool {self.name}: "
                f"repository must be 'owner/name', got {self.repository!r}"
            )
        return self


CatalogEntry = Union[ToolDefinition, InvalidConfigurationError]


class ToolCatalog:
    """
    Ordered, read-only collection of tool definitions.

    Records that failed validation are kept (with their error) so that they
    can be reported per tool instead of aborting the whole run.
    """

    def __init__(self, entries: Optional[dict[str, CatalogEntry]] = None, source: str = ""):
        self._entries: dict[str, CatalogEntry] = dict(entries or {})
        self.source = source

    @classmethod
    def from_definitions(cls, definitions, source: str = "") -> "ToolCatalog":
        """Build a catalog from already-valid definitions, keeping their order."""
        entries: dict[str, CatalogEntry] = {}
        for definition in definitions:
            entries[definition.name] = definition.validate()
        return cls(entries, source=source)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def names(self) -> list[str]:
        """All tool names in catalog order."""
        return list(self._entries)

    def exists(self, name: str) -> bool:
        return name in self._entries

    def is_valid(self, name: str) -> bool:
        return isinstance(self._entries.get(name), ToolDefinition)

    def get(self, name: str) -> ToolDefinition:
        """
        Look up a valid tool definition.

        Raises:
            KeyError: If the tool is not in the catalog
            InvalidConfigurationError: If the tool's record is invalid
        """
        entry = self._entries[name]
        if isinstance(entry, InvalidConfigurationError):
            raise InvalidConfigurationError(str(entry))
        return entry

    def error(self, name: str) -> Optional[InvalidConfigurationError]:
        """Validation error for a tool, if its record is invalid."""
        entry = self._entries.get(name)
        return entry if isinstance(entry, InvalidConfigurationError) else None

    def definitions(self) -> list[ToolDefinition]:
        """Valid definitions in catalog order."""
        return [e for e in self._entries.values() if isinstance(e, ToolDefinition)]

    def unknown(self, names) -> list[str]:
        """Names that are not in the catalog, preserving input order."""
        return [name for name in names if name not in self._entries]

    def description(self, name: str) -> str:
        entry = self._entries.get(name)
        if isinstance(entry, ToolDefinition):
            return entry.description
        return ""


__all__ = [
    "DEFAULT_VERSION_ARGS",
    "ToolDefinition",
    "CatalogEntry",
    "ToolCatalog",
]
