"""Catalog file parser for binkit.

Two formats are accepted:

YAML (``.yaml`` / ``.yml``)::

    version: 1
    tools:
      jq:
        description: Command-line JSON processor
        application: jq
        repository: jqlang/jq
        version_pattern: '\\d+\\.\\d+(\\.\\d+)?'
        archive_pattern: jq-linux-%ARCH%
        binary_path: jq-linux-%ARCH%

Legacy section format (any other suffix), as used by
``install_from_github.config``::

    [jq]
    DESCRIPTION="Command-line JSON processor"
    APPLICATION="jq"
    GITHUB_REPO="jqlang/jq"
    ARCHIVE_PATTERN="jq-linux-%ARCH%"
    BINARY_NAME="jq-linux-%ARCH%"

Values are parsed, never evaluated. A malformed file is a ConfigError; a
malformed tool record only invalidates that tool.
"""

import logging
import shlex
from pathlib import Path
from typing import Any, Optional

import yaml

from binkit.config.catalog import CatalogEntry, ToolCatalog, ToolDefinition
from binkit.core.exceptions import ConfigError, InvalidConfigurationError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")

# YAML field -> ToolDefinition attribute
YAML_FIELDS = {
    "description": "description",
    "application": "application",
    "repository": "repository",
    "version_args": "version_args",
    "version_pattern": "version_pattern",
    "archive_pattern": "archive_pattern",
    "binary_path": "binary_path",
}

# Legacy KEY -> ToolDefinition attribute
LEGACY_FIELDS = {
    "DESCRIPTION": "description",
    "APPLICATION": "application",
    "GITHUB_REPO": "repository",
    "VERSION_CMD_ARGS": "version_args",
    "VERSION_REGEX": "version_pattern",
    "ARCHIVE_PATTERN": "archive_pattern",
    "BINARY_NAME": "binary_path",
}

TOP_LEVEL_KEYS = {"version", "tools"}


def parse_catalog(config_path: Path) -> ToolCatalog:
    """
    Parse a catalog file.

    Args:
        config_path: Path to a YAML or legacy catalog

    Returns:
        ToolCatalog in file order

    Raises:
        ConfigError: If the file is missing, unreadable or malformed
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigError(f"Config path is not a file: {config_path}")

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Config file is not readable: {config_path}: {e}") from e

    if config_path.suffix.lower() in YAML_SUFFIXES:
        catalog = parse_yaml_catalog(text, source=str(config_path))
    else:
        catalog = parse_legacy_catalog(text, source=str(config_path))

    logger.debug(f"Loaded {len(catalog)} tool(s) from {config_path}")
    return catalog


# ============================================================================
# YAML
# ============================================================================


def parse_yaml_catalog(text: str, source: str = "<string>") -> ToolCatalog:
    """Parse YAML catalog text."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {source}: {e}") from e

    if data is None:
        raise ConfigError(f"Configuration file is empty: {source}")

    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {source} must be a mapping")

    unknown = sorted(set(data) - TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigError(f"Unknown top-level keys in {source}: {', '.join(unknown)}")

    if data.get("version", 1) != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    tools = data.get("tools")
    if tools is None:
        tools = {}
    if not isinstance(tools, dict):
        raise ConfigError(f"'tools' in {source} must be a mapping of tool name to settings")

    entries: dict[str, CatalogEntry] = {}
    for name, tool_data in tools.items():
        name = str(name)
        try:
            entries[name] = _parse_yaml_tool(name, tool_data)
        except InvalidConfigurationError as e:
            logger.debug(str(e))
            entries[name] = e

    return ToolCatalog(entries, source=source)


def _parse_yaml_tool(name: str, data: Any) -> ToolDefinition:
    """Parse one YAML tool record."""
    if not isinstance(data, dict):
        raise InvalidConfigurationError(
            f"Invalid configuration for tool {name}: expected a mapping"
        )

    unknown = sorted(str(key) for key in data if key not in YAML_FIELDS)
    if unknown:
        raise InvalidConfigurationError(
            f"Invalid configuration for tool {name}: unknown keys: {', '.join(unknown)}"
        )

    fields: dict[str, Any] = {}
    for key, value in data.items():
        attr = YAML_FIELDS[key]
        if attr == "version_args":
            fields[attr] = _parse_version_args(name, value)
        elif value is None:
            fields[attr] = ""
        elif isinstance(value, (str, int, float)):
            fields[attr] = str(value)
        else:
            raise InvalidConfigurationError(
                f"Invalid configuration for tool {name}: {key} must be a string"
            )

    return _build_definition(name, fields)


def _parse_version_args(name: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(shlex.split(value))
    if isinstance(value, list) and all(isinstance(v, (str, int)) for v in value):
        return tuple(str(v) for v in value)
    raise InvalidConfigurationError(
        f"Invalid configuration for tool {name}: version_args must be a string or list"
    )


# ============================================================================
# Legacy section format
# ============================================================================


def parse_legacy_catalog(text: str, source: str = "<string>") -> ToolCatalog:
    """Parse ``[tool]`` / ``KEY="value"`` catalog text."""
    sections: dict[str, dict[str, str]] = {}
    current: Optional[str] = None

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(("#", ";")):
            continue

        if line.startswith("[") and line.endswith("]"):
            current = line[1:-1].strip()
            if not current:
                raise ConfigError(f"{source}:{lineno}: empty section name")
            if current in sections:
                raise ConfigError(f"{source}:{lineno}: duplicate tool section [{current}]")
            sections[current] = {}
            continue

        key, sep, raw_value = line.partition("=")
        key = key.strip()
        if not sep or not key.isidentifier():
            raise ConfigError(f"{source}:{lineno}: expected KEY=value, got {raw_line!r}")
        if current is None:
            raise ConfigError(f"{source}:{lineno}: {key} appears outside of a [tool] section")

        try:
            sections[current][key] = _unquote(raw_value)
        except ValueError as e:
            raise ConfigError(f"{source}:{lineno}: cannot parse value of {key}: {e}") from e

    entries: dict[str, CatalogEntry] = {}
    for name, values in sections.items():
        try:
            entries[name] = _parse_legacy_tool(name, values)
        except InvalidConfigurationError as e:
            logger.debug(str(e))
            entries[name] = e

    return ToolCatalog(entries, source=source)


def _unquote(raw_value: str) -> str:
    """Apply shell quoting rules to a value, dropping trailing comments."""
    words = shlex.split(raw_value, comments=True)
    return " ".join(words)


def _parse_legacy_tool(name: str, values: dict[str, str]) -> ToolDefinition:
    unknown = sorted(key for key in values if key not in LEGACY_FIELDS)
    if unknown:
        raise InvalidConfigurationError(
            f"Invalid configuration for tool {name}: unknown keys: {', '.join(unknown)}"
        )

    fields: dict[str, Any] = {}
    for key, value in values.items():
        attr = LEGACY_FIELDS[key]
        if attr == "version_args":
            fields[attr] = tuple(shlex.split(value))
        else:
            fields[attr] = value

    return _build_definition(name, fields)


def _build_definition(name: str, fields: dict[str, Any]) -> ToolDefinition:
    definition = ToolDefinition(
        name=name,
        application=fields.get("application", ""),
        repository=fields.get("repository", ""),
        archive_pattern=fields.get("archive_pattern", ""),
        binary_path=fields.get("binary_path", ""),
        description=fields.get("description", ""),
        version_args=fields.get("version_args", ()),
        version_pattern=fields.get("version_pattern", ""),
    )
    return definition.validate()


__all__ = [
    "parse_catalog",
    "parse_yaml_catalog",
    "parse_legacy_catalog",
]
