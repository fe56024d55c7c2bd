"""
Plugin registry and factory system for Sieve.

This module provides a registry mapping filter type names to their
implementation classes, and a factory to instantiate them from
configuration.
"""

from collections.abc import Callable
from typing import Any

from sieve.core import Filter
from sieve.errors import ConfigurationError


class PluginRegistry:
    """
    Central registry for filter types.

    Maintains a mapping of type names (as used in the ``type`` key of the
    pipeline configuration) to implementation classes.
    """

    def __init__(self) -> None:
        self._filters: dict[str, type[Filter]] = {}

    def register_filter(self, type_name: str, cls: type[Filter]) -> None:
        """Register a filter implementation."""
        self._filters[type_name] = cls

    def get_filter(self, type_name: str) -> type[Filter]:
        """Get a filter class by type name."""
        if type_name not in self._filters:
            raise ConfigurationError(f"Unknown filter type: {type_name}")
        return self._filters[type_name]

    def list_plugins(self) -> dict[str, list[str]]:
        """List all registered plugins by category."""
        return {
            "filters": sorted(self._filters.keys()),
        }


# Global registry instance
_registry = PluginRegistry()


def create_filter(type_name: str, config: dict[str, Any]) -> Filter:
    """Create a filter instance from configuration."""
    cls = _registry.get_filter(type_name)
    return cls(config)


# Decorator for easy registration
def register_filter(type_name: str) -> Callable[[type[Filter]], type[Filter]]:
    """Decorator to register a filter class."""
    def decorator(cls: type[Filter]) -> type[Filter]:
        _registry.register_filter(type_name, cls)
        return cls
    return decorator


def get_registry() -> PluginRegistry:
    """Get the global plugin registry."""
    return _registry
