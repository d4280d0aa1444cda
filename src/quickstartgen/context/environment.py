"""Environment variable name collection; values never leave this module."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values

LOGGER = logging.getLogger(__name__)


def collect_env_keys(environ: Mapping[str, str] | None = None) -> tuple[str, ...]:
    """Snapshot the names of the currently defined environment variables."""
    source = os.environ if environ is None else environ
    return tuple(sorted(source.keys()))


def read_env_file_keys(path: str | Path) -> tuple[str, ...]:
    """Return the keys declared in a ``.env`` file, in file order."""
    env_path = Path(path)
    if not env_path.is_file():
        return ()
    try:
        parsed = dotenv_values(env_path)
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("env_file_unreadable", extra={"path": str(env_path), "error": str(exc)})
        return ()
    return tuple(key for key, value in parsed.items() if value is not None)
