"""Configuration module for binkit.

This module provides the tool catalog model, catalog file parsing, and
runtime settings.
"""

from binkit.config.catalog import (
    DEFAULT_VERSION_ARGS,
    ToolDefinition,
    ToolCatalog,
)
from binkit.config.parser import (
    parse_catalog,
    parse_yaml_catalog,
    parse_legacy_catalog,
)
from binkit.config.settings import (
    DEFAULT_INSTALL_PATH,
    Settings,
    discover_config_path,
)

__all__ = [
    "DEFAULT_VERSION_ARGS",
    "ToolDefinition",
    "ToolCatalog",
    "parse_catalog",
    "parse_yaml_catalog",
    "parse_legacy_catalog",
    "DEFAULT_INSTALL_PATH",
    "Settings",
    "discover_config_path",
]
