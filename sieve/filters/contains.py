"""
Contains filter for Sieve.
"""

import time
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from sieve.core import Filter
from sieve.errors import ConfigurationError, ExtractionError
from sieve.event import Event
from sieve.file_watch import FileWatch
from sieve.locking import ReadWriteLock
from sieve.logging_config import get_logger
from sieve.reference_set import ReferenceSet
from sieve.registry import register_filter
from sieve.scheduler import Loader, RefreshScheduler

logger = get_logger(__name__)


class ContainsConfig(BaseModel):
    """Options accepted by the contains filter."""
    model_config = ConfigDict(extra="forbid")

    id: str | None = None
    field: list[str] = Field(default_factory=list)
    value: list[str] = Field(default_factory=list)
    value_path: str | None = None
    refresh_interval: float = Field(default=600, gt=0)
    separator: str = Field(default="\n", min_length=1)
    load_timeout: float | None = Field(default=None, gt=0)
    watch: bool = False

    add_tag: list[str] = Field(default_factory=list)
    remove_tag: list[str] = Field(default_factory=list)
    add_field: dict[str, Any] = Field(default_factory=dict)
    remove_field: list[str] = Field(default_factory=list)

    @field_validator("field", "value", "add_tag", "remove_tag", "remove_field", mode="before")
    @classmethod
    def _wrap_single_string(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v

    @model_validator(mode="after")
    def _check_value_source(self) -> "ContainsConfig":
        if self.value_path and self.value:
            raise ValueError("The configuration options 'value' and 'value_path' are mutually exclusive")
        if self.watch and not self.value_path:
            raise ValueError("'watch' requires 'value_path'")
        return self


@register_filter("contains")
class ContainsFilter(Filter):
    """
    Matches events where any of the configured fields holds a value from a
    reference set.

    The set is given inline with ``value`` or loaded from ``value_path`` and
    reloaded every ``refresh_interval`` seconds. A failed reload keeps the
    previous set; a failed first load is a configuration error.

    Config:
        field: Field templates to check, e.g. ["%{fruit}", "%{[user][name]}"]
        value: Values to check against
        value_path: File holding the values (mutually exclusive with value)
        refresh_interval: Seconds between reloads of value_path (default: 600)
        separator: Separator between values in the file (default: newline)
        load_timeout: Optional limit in seconds for each file read
        watch: Also reload as soon as the file changes (default: False)
    """

    def __init__(
        self,
        config: dict[str, Any],
        clock: Callable[[], float] = time.monotonic,
        load_fn: Loader | None = None,
    ):
        try:
            self.options = ContainsConfig.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration for contains filter: {e}") from e

        super().__init__(self.options.model_dump())
        self.fields = self.options.field
        self.lock = ReadWriteLock()
        self.scheduler: RefreshScheduler | None = None
        self.file_watch: FileWatch | None = None
        self._static_set = ReferenceSet(self.options.value)

        if self.options.value_path:
            self.scheduler = RefreshScheduler(
                self.options.value_path,
                self.lock,
                separator=self.options.separator,
                refresh_interval=self.options.refresh_interval,
                timeout=self.options.load_timeout,
                clock=clock,
                load_fn=load_fn,
            )
            self.scheduler.initialize()

            if self.options.watch:
                self.file_watch = FileWatch(self.options.value_path, self.scheduler.expire)
                self.file_watch.start()

    @property
    def reference_set(self) -> ReferenceSet:
        """The reference set currently in use."""
        with self.lock.read_locked():
            return self._current()

    def _current(self) -> ReferenceSet:
        if self.scheduler is None:
            return self._static_set
        if self.scheduler.reference_set is None:
            return ReferenceSet.empty()
        return self.scheduler.reference_set

    def extract(self, event: Event) -> list[str]:
        """Interpolate the configured fields, skipping any that do not resolve."""
        values = []
        for template in self.fields:
            try:
                values.append(event.sprintf(template))
            except ExtractionError as e:
                logger.warning("Invalid field, skipping: %s (event: %r)", e, event)
        return values

    def evaluate(self, values: Sequence[str]) -> bool:
        """
        Check whether any value is in the reference set.

        Reloads the file first when the refresh interval has passed. Values
        are checked in order and checking stops at the first match.
        """
        if self.scheduler is not None:
            self.scheduler.refresh_if_due()

        with self.lock.read_locked():
            reference_set = self._current()
            for value in values:
                logger.debug("Checking value contains: %s", value)
                if reference_set.contains(value):
                    return True
        return False

    def filter(self, event: Event) -> None:
        """Tag the event if one of its fields is in the reference set."""
        if self.evaluate(self.extract(event)):
            self.filter_matched(event)

    def close(self) -> None:
        """Stop watching the reference file."""
        if self.file_watch:
            self.file_watch.stop()
            self.file_watch = None


# Export for dynamic importing
__all__ = ["ContainsFilter"]
