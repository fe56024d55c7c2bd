"""
Time-based refresh of a file-backed reference set.
"""

import time
from collections.abc import Callable
from pathlib import Path

from sieve import loader
from sieve.errors import ConfigurationError
from sieve.loader import LoadFailure, LoadResult
from sieve.locking import ReadWriteLock
from sieve.logging_config import get_logger
from sieve.reference_set import ReferenceSet

logger = get_logger(__name__)

Loader = Callable[[Path, str, float | None], LoadResult]


def _default_loader(path: Path, separator: str, timeout: float | None) -> LoadResult:
    return loader.load(path, separator, timeout)


class RefreshScheduler:
    """
    Owns a file-backed reference set and reloads it when it goes stale.

    The set is Fresh until the clock passes ``next_refresh`` and Due after.
    Every evaluation calls :meth:`refresh_if_due`; the unlocked deadline
    check keeps the common path cheap, and the check is repeated under the
    write lock so that threads which queued up behind a refresh do not
    reload the file again.

    ``reference_set`` and ``next_refresh`` are only assigned while the write
    lock is held. Readers take the read lock before looking at
    ``reference_set``.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        path: str | Path,
        lock: ReadWriteLock,
        separator: str = "\n",
        refresh_interval: float = 600,
        timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        load_fn: Loader | None = None,
    ):
        """
        Initialize the scheduler. Nothing is read until :meth:`initialize`.

        Args:
            path: File holding the reference values
            lock: Lock shared with the readers of the set
            separator: Literal separator between values in the file
            refresh_interval: Seconds between reload attempts
            timeout: Optional limit in seconds for each file read
            clock: Monotonic time source, injectable for tests
            load_fn: Function used to read the file, injectable for tests
        """
        self.path = Path(path)
        self.lock = lock
        self.separator = separator
        self.refresh_interval = refresh_interval
        self.timeout = timeout
        self.clock = clock
        self.load_fn = load_fn or _default_loader

        self.reference_set: ReferenceSet | None = None
        self.next_refresh: float = clock() + refresh_interval

    def initialize(self) -> ReferenceSet:
        """
        Perform the first load.

        Raises:
            ConfigurationError: If the file cannot be read or holds no values
        """
        with self.lock.write_locked():
            self._reload()
            if self.reference_set is None:
                # _reload raises before getting here; kept for type narrowing
                raise ConfigurationError(f"No reference set loaded from {self.path}")
            logger.info(
                "Loaded %d reference value(s) from %s", len(self.reference_set), self.path
            )
            return self.reference_set

    def is_due(self) -> bool:
        """Whether the refresh deadline has passed."""
        return self.clock() >= self.next_refresh

    def refresh_if_due(self) -> bool:
        """
        Reload the file if the refresh deadline has passed.

        Blocks while another thread is refreshing. Load failures after the
        first successful load are logged and never raised.

        Returns:
            True if this call performed a reload attempt
        """
        if not self.is_due():
            return False

        with self.lock.write_locked():
            # Another thread may have refreshed while we waited for the lock
            if not self.is_due():
                return False
            self._reload()
            return True

    def expire(self) -> None:
        """Make the next :meth:`refresh_if_due` call reload the file."""
        with self.lock.write_locked():
            self.next_refresh = self.clock()
        logger.debug("Refresh deadline expired for %s", self.path)

    def _reload(self) -> None:
        """
        Load the file and install the result. Caller holds the write lock.

        The deadline moves forward after every attempt, including one where
        the loader raised; such an exception is treated as an io failure.
        """
        try:
            result = self.load_fn(self.path, self.separator, self.timeout)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.exception("Loader raised while reading %s", self.path)
            result = LoadFailure(path=str(self.path), reason="io", detail=repr(e))
        finally:
            self.next_refresh = self.clock() + self.refresh_interval

        if isinstance(result, LoadFailure):
            self._handle_failure(result)
            return

        previous = self.reference_set
        self.reference_set = result
        if previous is not None:
            logger.debug(
                "Refreshed %s: %d -> %d value(s)", self.path, len(previous), len(result)
            )

    def _handle_failure(self, failure: LoadFailure) -> None:
        if self.reference_set is None:
            raise ConfigurationError(
                "The file containing the reference values is invalid, please check "
                f"the separator character or permissions for the file: {failure.describe()}"
            )

        logger.error(
            "Error while loading %s, keeping %d previously loaded value(s): %s",
            self.path,
            len(self.reference_set),
            failure.describe()
        )
