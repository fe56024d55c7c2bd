"""
Loads a reference set from a delimited text file.
"""

import threading
from dataclasses import dataclass
from pathlib import Path

from sieve.logging_config import get_logger
from sieve.reference_set import ReferenceSet

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoadFailure:
    """Result of a load that produced no usable reference set."""
    path: str
    reason: str  # "io", "empty" or "timeout"
    detail: str = ""

    def describe(self) -> str:
        """Human readable summary for log messages."""
        if self.reason == "empty":
            return f"{self.path} produced no values (check the separator)"
        if self.reason == "timeout":
            return f"reading {self.path} timed out: {self.detail}"
        return f"could not read {self.path}: {self.detail}"


LoadResult = ReferenceSet | LoadFailure


def split_values(content: str, separator: str) -> list[str]:
    """
    Split file content on a literal separator.

    Empty strings left by trailing separators are dropped, so a file that
    ends with a newline does not add "" to the set. Leading and interior
    empty strings are kept.
    """
    if not separator:
        raise ValueError("separator must not be empty")

    values = content.split(separator)
    while values and values[-1] == "":
        values.pop()
    return values


def _read(path: Path, separator: str) -> list[str]:
    with path.open("r", encoding="utf-8") as f:
        return split_values(f.read(), separator)


# Reader threads that outlived their timeout, by path
_stuck_readers: dict[Path, threading.Thread] = {}
_stuck_readers_lock = threading.Lock()


def _read_with_timeout(path: Path, separator: str, timeout: float) -> list[str]:
    """
    Run the read on a helper thread and give up after timeout seconds.

    A reader that times out is left running. While it is alive no new
    reader is started for the same path, so a hung filesystem costs one
    thread per path rather than one per refresh.
    """
    with _stuck_readers_lock:
        previous = _stuck_readers.get(path)
        if previous is not None and previous.is_alive():
            raise TimeoutError("previous read has not finished")
        _stuck_readers.pop(path, None)

    outcome: dict[str, object] = {}

    def run() -> None:
        try:
            outcome["values"] = _read(path, separator)
        except Exception as e:  # pylint: disable=broad-exception-caught
            outcome["error"] = e

    reader = threading.Thread(target=run, name=f"sieve-load-{path.name}", daemon=True)
    reader.start()
    reader.join(timeout)

    if reader.is_alive():
        with _stuck_readers_lock:
            _stuck_readers[path] = reader
        raise TimeoutError(f"no result after {timeout}s")
    if "error" in outcome:
        raise outcome["error"]  # type: ignore[misc]
    if "values" not in outcome:
        raise OSError("reader thread exited without a result")
    return outcome["values"]  # type: ignore[return-value]


def load(path: str | Path, separator: str = "\n", timeout: float | None = None) -> LoadResult:
    """
    Read a file and build a reference set from its values.

    Never raises for I/O problems or unusable paths; callers branch on the
    result type.

    Args:
        path: File to read
        separator: Literal string separating the values
        timeout: Optional limit in seconds for the read

    Returns:
        A new ReferenceSet, or a LoadFailure describing why none was built
    """
    path = Path(path)

    try:
        if timeout is None:
            values = _read(path, separator)
        else:
            values = _read_with_timeout(path, separator, timeout)
    except TimeoutError as e:
        return LoadFailure(path=str(path), reason="timeout", detail=str(e))
    except (OSError, ValueError) as e:
        # ValueError covers decode errors and paths open() rejects (NUL bytes)
        return LoadFailure(path=str(path), reason="io", detail=str(e))

    if not values:
        return LoadFailure(path=str(path), reason="empty")

    reference_set = ReferenceSet(values)
    logger.debug(
        "Loaded %d value(s) (%d unique) from %s",
        len(values), len(reference_set), path
    )
    return reference_set
