"""
Minimal event model used by the pipeline.

Events are nested dictionaries. Fields are addressed either by a top-level
name (``fruit``) or by a bracketed path (``[http][method]``). Tags live in
the ``tags`` field as a list of strings.
"""

import json
import re
import threading
from typing import Any

from sieve.errors import ExtractionError

TAGS_FIELD = "tags"

_TEMPLATE_PATTERN = re.compile(r"%\{([^}]+)\}")
_PATH_PATTERN = re.compile(r"\[([^\[\]]+)\]")


def parse_reference(reference: str) -> list[str]:
    """
    Split a field reference into its path components.

    >>> parse_reference("[a][b]")
    ['a', 'b']
    >>> parse_reference("a")
    ['a']
    """
    reference = reference.strip()
    if reference.startswith("["):
        parts = _PATH_PATTERN.findall(reference)
        if not parts or "".join(f"[{p}]" for p in parts) != reference:
            raise ValueError(f"Invalid field reference: {reference}")
        return parts
    if not reference:
        raise ValueError("Empty field reference")
    return [reference]


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_format_value(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True)
    return str(value)


class Event:
    """
    A single event flowing through the pipeline.

    Reads and writes of the underlying data are guarded by a lock.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})
        self._lock = threading.RLock()

    def get(self, reference: str, default: Any = None) -> Any:
        """Return the value at a field reference, or default if absent."""
        node: Any = self._data
        with self._lock:
            for key in parse_reference(reference):
                if not isinstance(node, dict) or key not in node:
                    return default
                node = node[key]
            return node

    def includes(self, reference: str) -> bool:
        """Whether the event has a field at the reference."""
        sentinel = object()
        return self.get(reference, sentinel) is not sentinel

    def set(self, reference: str, value: Any) -> None:
        """Set a field, creating intermediate objects as needed."""
        path = parse_reference(reference)
        with self._lock:
            node = self._data
            for key in path[:-1]:
                child = node.get(key)
                if not isinstance(child, dict):
                    child = {}
                    node[key] = child
                node = child
            node[path[-1]] = value

    def remove(self, reference: str) -> Any:
        """Remove a field and return its previous value (None if absent)."""
        path = parse_reference(reference)
        with self._lock:
            node: Any = self._data
            for key in path[:-1]:
                if not isinstance(node, dict) or key not in node:
                    return None
                node = node[key]
            if isinstance(node, dict):
                return node.pop(path[-1], None)
            return None

    @property
    def tags(self) -> list[str]:
        """A copy of the event's tags."""
        with self._lock:
            tags = self._data.get(TAGS_FIELD) or []
            if isinstance(tags, str):
                return [tags]
            return list(tags)

    def add_tag(self, tag: str) -> None:
        """Add a tag unless it is already present."""
        with self._lock:
            tags = self.tags
            if tag not in tags:
                tags.append(tag)
                self._data[TAGS_FIELD] = tags

    def remove_tag(self, tag: str) -> None:
        """Remove a tag if present."""
        with self._lock:
            tags = self.tags
            if tag in tags:
                tags.remove(tag)
                self._data[TAGS_FIELD] = tags

    def sprintf(self, template: str) -> str:
        """
        Interpolate ``%{reference}`` placeholders with field values.

        Strings are inserted as-is, lists are joined with commas and
        objects are rendered as JSON.

        Raises:
            ExtractionError: If a referenced field is missing, null, or the
                reference itself is malformed
        """
        def replace(match: re.Match[str]) -> str:
            reference = match.group(1)
            try:
                value = self.get(reference)
            except ValueError as e:
                raise ExtractionError(template, reference) from e
            if value is None:
                raise ExtractionError(template, reference)
            return _format_value(value)

        return _TEMPLATE_PATTERN.sub(replace, template)

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the event data."""
        with self._lock:
            return json.loads(json.dumps(self._data, default=str))

    def __repr__(self) -> str:
        return f"Event({self._data!r})"
