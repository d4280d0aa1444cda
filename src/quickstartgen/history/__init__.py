"""Shell history reader implementations."""

from pathlib import Path

from .base import HistoryReader, filter_recent
from .bash_reader import BashHistoryReader
from .zsh_reader import ZshHistoryReader, parse_zsh_entry


def create_history_reader(path: str | Path) -> HistoryReader:
    """Pick a reader from the history file name, defaulting to zsh."""
    history_path = Path(path)
    if "bash" in history_path.name.lower():
        return BashHistoryReader(history_path)
    return ZshHistoryReader(history_path)


__all__ = [
    "BashHistoryReader",
    "HistoryReader",
    "ZshHistoryReader",
    "create_history_reader",
    "filter_recent",
    "parse_zsh_entry",
]
