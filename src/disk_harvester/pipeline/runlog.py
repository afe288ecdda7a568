"""Run log collector.

Accumulates one text line per outcome for the whole run. The same
collector instance is passed to every stage and published once at the end.
"""

import logging
from typing import Iterator, List

logger = logging.getLogger("disk_harvester.runlog")


class RunLog:
    """Append-only, ordered sequence of outcome lines."""

    def __init__(self):
        self._entries: List[str] = []
        self._failures = 0

    @property
    def entries(self) -> List[str]:
        """Copy of all entries in order."""
        return self._entries.copy()

    @property
    def failure_count(self) -> int:
        """Number of failure entries recorded."""
        return self._failures

    def success(self, message: str) -> None:
        """Record a successful outcome."""
        self._entries.append(f"SUCCESS: {message}")
        logger.info(message)

    def failure(self, message: str) -> None:
        """Record a failed outcome."""
        self._entries.append(f"FAILURE: {message}")
        self._failures += 1
        logger.error(message)

    def text(self) -> str:
        """All entries joined by newlines."""
        return "\n".join(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries.copy())
