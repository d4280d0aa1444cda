"""Base shell history reader primitives."""

from __future__ import annotations

import abc
import logging
from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

from quickstartgen.models import HistoryEntry

LOGGER = logging.getLogger(__name__)


def filter_recent(
    entries: Iterable[HistoryEntry], hours: int, now: datetime
) -> tuple[HistoryEntry, ...]:
    """Keep entries no older than ``hours`` before ``now``, in their original order."""
    cutoff = now - timedelta(hours=hours)
    return tuple(entry for entry in entries if entry.timestamp >= cutoff)


def timestamp_from_epoch(raw: str) -> datetime | None:
    """Parse a decimal epoch string, returning ``None`` for anything else."""
    value = raw.strip()
    if not value.isdigit():
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


class HistoryReader(abc.ABC):
    """Read-only view over a shell history file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Shell whose history format this reader understands."""

    @abc.abstractmethod
    def parse_lines(self, lines: Iterable[str]) -> Iterator[HistoryEntry]:
        """Yield entries in file order, skipping lines without a usable timestamp."""

    def read_entries(self) -> tuple[HistoryEntry, ...]:
        """Parse the whole file; a missing or unreadable file yields no entries."""
        if not self.path.is_file():
            LOGGER.info("history_file_missing", extra={"shell": self.name, "path": str(self.path)})
            return ()
        try:
            with self.path.open("r", encoding="utf-8", errors="replace") as fh:
                entries = tuple(self.parse_lines(fh))
        except OSError as exc:
            LOGGER.warning(
                "history_file_unreadable",
                extra={"shell": self.name, "path": str(self.path), "error": str(exc)},
            )
            return ()

        LOGGER.debug(
            "history_file_parsed",
            extra={"shell": self.name, "path": str(self.path), "entries": len(entries)},
        )
        return entries

    def read_recent(self, hours: int, *, now: datetime | None = None) -> tuple[HistoryEntry, ...]:
        reference = now or datetime.now(timezone.utc)
        return filter_recent(self.read_entries(), hours, reference)
