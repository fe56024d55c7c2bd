"""
Immutable set of reference strings that event values are checked against.
"""

from collections.abc import Iterable, Iterator


class ReferenceSet:
    """
    An immutable, deduplicated set of strings.

    A new instance is built for every successful load and swapped in as a
    whole; instances are never modified after construction.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[str] = ()) -> None:
        self._values: frozenset[str] = frozenset(values)

    @classmethod
    def empty(cls) -> "ReferenceSet":
        """Return a set that never matches."""
        return cls()

    def contains(self, value: str) -> bool:
        """Check whether a value is a member of the set."""
        return value in self._values

    def __contains__(self, value: object) -> bool:
        return value in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"ReferenceSet(size={len(self._values)})"
