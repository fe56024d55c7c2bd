"""
Tests for plugin registry and factory system.
"""

import pytest

# Import plugin modules to trigger decorator registration
# pylint: disable=unused-import
# ruff: noqa: F401
import sieve.filters
from sieve.core import Filter
from sieve.errors import ConfigurationError
from sieve.event import Event
from sieve.filters import ContainsFilter
from sieve.registry import PluginRegistry, create_filter, get_registry, register_filter


class EchoFilter(Filter):
    """Matches every event."""

    def filter(self, event: Event) -> None:
        self.filter_matched(event)


class TestPluginRegistry:
    """Tests for PluginRegistry class."""

    def test_register_and_get_filter(self) -> None:
        """Test registering and retrieving a filter."""
        registry = PluginRegistry()

        registry.register_filter("echo", EchoFilter)

        assert registry.get_filter("echo") is EchoFilter

    def test_get_unknown_filter_raises_error(self) -> None:
        """Test that getting an unknown filter raises ConfigurationError."""
        registry = PluginRegistry()

        with pytest.raises(ConfigurationError, match="Unknown filter type: nonexistent"):
            registry.get_filter("nonexistent")

    def test_list_plugins_empty(self) -> None:
        """Test listing plugins in an empty registry."""
        assert PluginRegistry().list_plugins() == {"filters": []}

    def test_list_plugins_sorted(self) -> None:
        """Test that listed filter names are sorted."""
        registry = PluginRegistry()
        registry.register_filter("zeta", EchoFilter)
        registry.register_filter("alpha", EchoFilter)

        assert registry.list_plugins() == {"filters": ["alpha", "zeta"]}

    def test_overwrite_registration(self) -> None:
        """Test that registering the same type name overwrites previous registration."""
        registry = PluginRegistry()

        class Other(EchoFilter):
            pass

        registry.register_filter("echo", EchoFilter)
        registry.register_filter("echo", Other)

        assert registry.get_filter("echo") is Other


class TestGlobalRegistry:
    """Tests for the global registry and built-in plugins."""

    def test_contains_registered(self) -> None:
        """Test that the contains filter is registered on import."""
        assert get_registry().get_filter("contains") is ContainsFilter
        assert "contains" in get_registry().list_plugins()["filters"]

    def test_create_filter(self) -> None:
        """Test creating a filter from configuration."""
        f = create_filter("contains", {"field": ["%{a}"], "value": ["apple"]})

        assert isinstance(f, ContainsFilter)
        assert f.evaluate(["apple"])

    def test_create_unknown_filter(self) -> None:
        """Test that creating an unknown filter raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            create_filter("does_not_exist", {})

    def test_decorator_returns_original_class(self) -> None:
        """Test that the decorator registers and returns the class unchanged."""
        @register_filter("decorator_test")
        class DecoratedFilter(EchoFilter):
            custom_attr = "test"

        assert DecoratedFilter.custom_attr == "test"
        assert get_registry().get_filter("decorator_test") is DecoratedFilter


class TestFilterBase:
    """Tests for the Filter base class decorations."""

    def test_id_defaults_to_class_name(self) -> None:
        """Test the default filter id."""
        assert EchoFilter({}).id == "EchoFilter"
        assert EchoFilter({"id": "mine"}).id == "mine"

    def test_missing_decoration_field_kept_literal(self) -> None:
        """Test that a decoration referencing a missing field is kept as written."""
        event = Event()

        EchoFilter({"add_tag": ["seen_%{missing}"]}).filter(event)

        assert event.tags == ["seen_%{missing}"]

    def test_builtin_filters_exported(self) -> None:
        """Test that importing the filters package exports and registers the built-ins."""
        assert "ContainsFilter" in sieve.filters.__all__
        assert get_registry().get_filter("contains") is ContainsFilter
