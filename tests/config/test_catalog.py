"""
Unit tests for tool definitions and the tool catalog.
"""

import pytest

from binkit.config.catalog import ToolCatalog, ToolDefinition
from binkit.core.exceptions import InvalidConfigurationError


class TestToolDefinition:
    """Test ToolDefinition."""

    def test_version_defaults(self, make_definition):
        """Test --version and a three-part pattern are used when unset."""
        definition = make_definition()

        assert definition.effective_version_args == ("--version",)
        assert definition.effective_version_pattern == r"\d+\.\d+\.\d+"

    def test_version_overrides(self, make_definition):
        definition = make_definition(version_args=("version",), version_pattern=r"\d+")

        assert definition.effective_version_args == ("version",)
        assert definition.effective_version_pattern == r"\d+"

    def test_validate_returns_self(self, make_definition):
        definition = make_definition()
        assert definition.validate() is definition

    @pytest.mark.parametrize(
        "field_name", ["application", "repository", "archive_pattern", "binary_path"]
    )
    def test_required_fields(self, make_definition, field_name):
        """Test each required field must be non-empty."""
        definition = make_definition(**{field_name: ""})

        with pytest.raises(InvalidConfigurationError, match=field_name):
            definition.validate()

    @pytest.mark.parametrize("repository", ["jq", "/jq", "jqlang/", "a/b/c"])
    def test_repository_shape(self, make_definition, repository):
        """Test the repository must be 'owner/name'."""
        with pytest.raises(InvalidConfigurationError, match="owner/name"):
            make_definition(repository=repository).validate()

    def test_immutable(self, make_definition):
        definition = make_definition()
        with pytest.raises(AttributeError):
            definition.application = "other"


class TestToolCatalog:
    """Test ToolCatalog."""

    def test_order_preserved(self, catalog):
        """Test names come back in catalog order."""
        assert catalog.names() == ["alpha", "broken", "beta"]
        assert list(catalog) == ["alpha", "broken", "beta"]
        assert len(catalog) == 3

    def test_get_valid(self, catalog):
        assert catalog.get("alpha").application == "alpha"

    def test_get_unknown(self, catalog):
        with pytest.raises(KeyError):
            catalog.get("missing")

    def test_get_invalid(self, catalog):
        """Test invalid records raise their configuration error."""
        with pytest.raises(InvalidConfigurationError, match="broken"):
            catalog.get("broken")

    def test_validity(self, catalog):
        assert catalog.exists("broken") is True
        assert catalog.is_valid("broken") is False
        assert catalog.is_valid("alpha") is True
        assert catalog.is_valid("missing") is False
        assert "beta" in catalog

    def test_error(self, catalog):
        assert catalog.error("alpha") is None
        assert "application" in str(catalog.error("broken"))

    def test_definitions_skip_invalid(self, catalog):
        assert [d.name for d in catalog.definitions()] == ["alpha", "beta"]

    def test_unknown(self, catalog):
        """Test unknown names are reported in input order."""
        assert catalog.unknown(["zeta", "alpha", "eta"]) == ["zeta", "eta"]

    def test_description(self, catalog):
        assert catalog.description("alpha") == "The alpha tool"
        assert catalog.description("broken") == ""

    def test_from_definitions(self, make_definition):
        catalog = ToolCatalog.from_definitions([make_definition("b"), make_definition("a")])

        assert catalog.names() == ["b", "a"]

    def test_from_definitions_validates(self):
        bad = ToolDefinition("x", "", "owner/x", "x", "x")

        with pytest.raises(InvalidConfigurationError):
            ToolCatalog.from_definitions([bad])
