"""Reader for bash history written with ``HISTTIMEFORMAT`` set."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime

from quickstartgen.models import HistoryEntry

from .base import HistoryReader, timestamp_from_epoch


class BashHistoryReader(HistoryReader):
    """Adapter for ``~/.bash_history`` with ``#<epoch>`` comment lines.

    Commands that are not preceded by a timestamp comment cannot be placed in
    time and are skipped.
    """

    @property
    def name(self) -> str:
        return "bash"

    def parse_lines(self, lines: Iterable[str]) -> Iterator[HistoryEntry]:
        timestamp: datetime | None = None
        for raw_line in lines:
            line = raw_line.strip()
            if not line:
                continue
            if line.startswith("#"):
                parsed = timestamp_from_epoch(line[1:])
                if parsed is not None:
                    timestamp = parsed
                    continue
            if timestamp is None:
                continue
            yield HistoryEntry(command=line, timestamp=timestamp)
            timestamp = None
