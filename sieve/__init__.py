"""
Sieve - A streaming event filter for membership checks.

This package checks values extracted from events against a reference
set of strings, given inline or loaded from a file that is refreshed
periodically, and tags the events that match.
"""

__version__ = "0.1.0"
