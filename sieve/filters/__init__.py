"""
Built-in filter implementations for Sieve.

Importing this package registers every built-in filter type.
"""

from sieve.filters.contains import ContainsFilter

__all__ = ["ContainsFilter"]
