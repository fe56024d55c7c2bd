"""
Pipeline that runs events through a chain of filters on worker threads.
"""

import queue
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from sieve.config import Config
from sieve.core import Filter
from sieve.errors import ConfigurationError
from sieve.event import Event
from sieve.logging_config import get_logger
from sieve.plugins import create_filter

logger = get_logger(__name__)

_STOP = object()


@dataclass
class PipelineStats:
    """Counters for one :meth:`Pipeline.run` call."""
    processed: int = 0
    failed: int = 0


class Pipeline:
    """
    Runs every event through each filter in order.

    All workers share the same filter instances. With more than one worker
    the order in which events reach the sink is not guaranteed.
    """

    def __init__(self, filters: list[Filter], workers: int = 1) -> None:
        """
        Initialize the pipeline.

        Args:
            filters: Filters to apply, in order
            workers: Number of worker threads used by :meth:`run`
        """
        if workers < 1:
            raise ConfigurationError("workers must be at least 1")
        self.filters = filters
        self.workers = workers

    def process(self, event: Event) -> bool:
        """
        Apply every filter to a single event.

        A filter that raises is logged and skipped; the remaining filters
        still run.

        Returns:
            True if every filter completed without raising
        """
        ok = True
        for f in self.filters:
            try:
                f.filter(event)
            except Exception:
                ok = False
                logger.error("Error in filter '%s' for event %r", f.id, event, exc_info=True)
        return ok

    def run(self, events: Iterable[Event], sink: Callable[[Event], None]) -> PipelineStats:
        """
        Process events on worker threads and hand each one to the sink.

        Calls to the sink are serialized. Returns once every event has been
        processed.

        Args:
            events: Events to process
            sink: Called with each processed event

        Returns:
            Counters for the run
        """
        stats = PipelineStats()
        work: queue.Queue[object] = queue.Queue(maxsize=self.workers * 64)
        sink_lock = threading.Lock()

        def worker() -> None:
            while True:
                item = work.get()
                if item is _STOP or not isinstance(item, Event):
                    return
                ok = self.process(item)
                with sink_lock:
                    stats.processed += 1
                    if not ok:
                        stats.failed += 1
                    try:
                        sink(item)
                    except Exception:
                        logger.error("Error writing event %r", item, exc_info=True)

        threads = [
            threading.Thread(target=worker, name=f"sieve-worker-{i}", daemon=True)
            for i in range(self.workers)
        ]
        for thread in threads:
            thread.start()

        try:
            for event in events:
                work.put(event)
        finally:
            for _ in threads:
                work.put(_STOP)
            for thread in threads:
                thread.join()

        logger.info(
            "Processed %d event(s) with %d worker(s), %d with filter errors",
            stats.processed, self.workers, stats.failed
        )
        return stats

    def close(self) -> None:
        """Close all filters."""
        for f in self.filters:
            try:
                f.close()
            except Exception:
                logger.warning("Error closing filter '%s'", f.id, exc_info=True)


def create_pipeline(config: Config) -> Pipeline:
    """
    Factory function to create a pipeline from configuration.

    Filters are created in order; if one fails, those already created are
    closed before the error propagates.

    Raises:
        ConfigurationError: If a filter type is unknown or its options are invalid
    """
    filters: list[Filter] = []
    try:
        for filter_config in config.filters:
            filters.append(create_filter(filter_config.type, dict(filter_config.config)))
    except Exception:
        for f in filters:
            f.close()
        raise

    logger.info("Configured %d filter(s)", len(filters))
    return Pipeline(filters, workers=config.workers)
