"""Reader for zsh ``EXTENDED_HISTORY`` files."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from quickstartgen.models import HistoryEntry

from .base import HistoryReader, timestamp_from_epoch

LOGGER = logging.getLogger(__name__)


def parse_zsh_entry(entry: str) -> HistoryEntry | None:
    """Parse one ``: <epoch>:<duration>;<command>`` record."""
    if not entry.startswith(":"):
        return None

    header, separator, command = entry[1:].partition(";")
    if not separator:
        return None

    epoch, _, duration = header.partition(":")
    timestamp = timestamp_from_epoch(epoch)
    if timestamp is None:
        LOGGER.debug("history_timestamp_invalid", extra={"shell": "zsh", "value": epoch.strip()})
        return None

    command = command.strip()
    if not command:
        return None

    duration = duration.strip()
    return HistoryEntry(
        command=command,
        timestamp=timestamp,
        duration_seconds=int(duration) if duration.isdigit() else None,
    )


class ZshHistoryReader(HistoryReader):
    """Adapter for ``~/.zsh_history`` written with ``setopt EXTENDED_HISTORY``."""

    @property
    def name(self) -> str:
        return "zsh"

    def parse_lines(self, lines: Iterable[str]) -> Iterator[HistoryEntry]:
        pending: list[str] = []
        for raw_line in lines:
            line = raw_line.rstrip("\n")
            # multi-line commands are stored with a trailing backslash per line
            if line.endswith("\\"):
                pending.append(line[:-1])
                continue
            pending.append(line)
            entry = parse_zsh_entry("\n".join(pending))
            pending = []
            if entry is not None:
                yield entry

        if pending:
            entry = parse_zsh_entry("\n".join(pending))
            if entry is not None:
                yield entry
