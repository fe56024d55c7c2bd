"""
Plugin initialization for Sieve.

This module imports all built-in plugins to register them with the registry.
Import this module to ensure all plugins are available.
"""

# Import all plugin modules to trigger registration decorators
# pylint: disable=unused-import
# ruff: noqa: F401
from sieve import filters

# Re-export registry functions for convenience
from sieve.registry import create_filter, get_registry

__all__ = [
    "create_filter",
    "get_registry",
]
