"""
Watches a reference file with watchdog and reports changes.

Used by filters that opt in to ``watch: true`` so that an edited file is
reloaded on the next event instead of waiting for the refresh interval.
"""

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer as WatchdogObserver

from sieve.logging_config import get_logger

if TYPE_CHECKING:
    from watchdog.observers.api import BaseObserver

logger = get_logger(__name__)


def _event_paths(event: FileSystemEvent) -> list[Path]:
    paths = [event.src_path]
    dest = getattr(event, "dest_path", None)
    if dest:
        paths.append(dest)
    return [Path(p.decode() if isinstance(p, bytes) else p) for p in paths]


class FileWatch:
    """
    Calls ``on_change`` whenever the watched file is modified, created,
    moved into place or deleted.

    The parent directory is watched so that editors which replace the file
    (write to a temp file, then rename) are still picked up.
    """

    def __init__(self, path: str | Path, on_change: Callable[[], None]) -> None:
        self.path = Path(path).resolve()
        self.on_change = on_change
        self.observer: BaseObserver | None = None

    def start(self) -> None:
        """Start watching."""
        handler = self._create_event_handler()
        self.observer = WatchdogObserver()
        self.observer.schedule(handler, str(self.path.parent), recursive=False)
        self.observer.daemon = True
        self.observer.start()
        logger.info("Watching %s for changes", self.path)

    def stop(self) -> None:
        """Stop watching."""
        if self.observer:
            self.observer.stop()
            self.observer.join(timeout=5)
            self.observer = None

    def _create_event_handler(self) -> FileSystemEventHandler:
        watch = self

        class Handler(FileSystemEventHandler):
            """Forwards events for the watched file only."""

            def on_any_event(self, event: FileSystemEvent) -> None:
                if event.is_directory or event.event_type in ("opened", "closed_no_write"):
                    return
                paths = [p.resolve() for p in _event_paths(event)]
                if watch.path not in paths:
                    return
                logger.debug("%s event on %s", event.event_type, watch.path)
                try:
                    watch.on_change()
                except Exception:
                    logger.error("Error handling change of %s", watch.path, exc_info=True)

        return Handler()
