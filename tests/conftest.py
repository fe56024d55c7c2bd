"""
Pytest configuration and fixtures for Sieve tests.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from sieve.loader import LoadResult, load


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingLoader:
    """Wraps the real file loader and counts calls."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, path: Path, separator: str, timeout: float | None) -> LoadResult:
        self.calls += 1
        return load(path, separator, timeout)


@pytest.fixture
def clock() -> FakeClock:
    """A fake clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def counting_loader() -> CountingLoader:
    """A loader that records how often it is called."""
    return CountingLoader()


@pytest.fixture
def values_file(tmp_path: Path) -> Path:
    """A reference file with three values."""
    path = tmp_path / "values.txt"
    path.write_text("fox\nfish\ncat\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_sieve_logger() -> Iterator[None]:
    """
    Undo setup_logging() between tests.

    The CLI configures the 'sieve' logger not to propagate, which would hide
    records from caplog in later tests.
    """
    yield
    logger = logging.getLogger("sieve")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
