"""
Core interfaces for Sieve filters.

A filter receives one event at a time, decides whether it matches and,
when it does, applies the common match decorations:
- add_tag / remove_tag: tags to add or remove
- add_field: fields to set (values may use %{field} references)
- remove_field: fields to delete
"""

from abc import ABC, abstractmethod
from typing import Any

from sieve.errors import ExtractionError
from sieve.event import Event
from sieve.logging_config import get_logger

logger = get_logger(__name__)


class Filter(ABC):
    """
    Base class for all filters.

    Subclasses implement :meth:`filter` and call :meth:`filter_matched`
    for events that match. Instances are shared by all pipeline workers and
    must be safe for concurrent :meth:`filter` calls.
    """

    def __init__(self, config: dict[str, Any]):
        """
        Initialize the filter with configuration.

        Args:
            config: Type-specific configuration dictionary, including the
                common decoration options
        """
        self.config = config
        self.id: str = config.get("id") or self.__class__.__name__
        self.add_tag: list[str] = list(config.get("add_tag", []))
        self.remove_tag: list[str] = list(config.get("remove_tag", []))
        self.add_field: dict[str, Any] = dict(config.get("add_field", {}))
        self.remove_field: list[str] = list(config.get("remove_field", []))

    @abstractmethod
    def filter(self, event: Event) -> None:
        """
        Check an event and decorate it if it matches.

        Args:
            event: The event to check
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release resources held by the filter. Default is a no-op."""

    def filter_matched(self, event: Event) -> None:
        """Apply the configured decorations to a matching event."""
        for tag in self.add_tag:
            event.add_tag(self._interpolate(event, tag))

        for tag in self.remove_tag:
            event.remove_tag(self._interpolate(event, tag))

        for reference, value in self.add_field.items():
            if isinstance(value, str):
                value = self._interpolate(event, value)
            event.set(self._interpolate(event, reference), value)

        for reference in self.remove_field:
            event.remove(self._interpolate(event, reference))

        logger.debug("Filter '%s' matched event", self.id)

    def _interpolate(self, event: Event, template: str) -> str:
        """Interpolate a decoration value, keeping it literal if a field is missing."""
        try:
            return event.sprintf(template)
        except ExtractionError:
            return template
