"""Configuration resolved from the project's ``.env`` file and the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from quickstartgen.errors import ConfigurationError, FileAccessError

DEFAULT_MODEL = "gpt-4o"
DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_HISTORY_HOURS = 5
DEFAULT_MAX_FILE_COUNT = 5
DEFAULT_MAX_FILE_CONTENT_CHARS = 2000
ENV_FILE_NAME = ".env"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

LOGGER = logging.getLogger(__name__)


def _to_bool(value: str | None, default: bool = False) -> bool:
    """Convert common env var truthy/falsy values into booleans."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Options for a single run, built once at startup."""

    api_key: str | None
    model: str
    api_url: str
    timeout: float
    enable_openai: bool
    debug_request: bool
    include_shell_history: bool
    include_repository_files: bool
    include_env_keys: bool
    include_file_contents: bool
    history_hours: int
    max_file_count: int
    max_file_content_chars: int
    shell_history_file: str
    log_level: str
    working_directory: str

    @property
    def env_file_path(self) -> Path:
        return Path(self.working_directory) / ENV_FILE_NAME

    @classmethod
    def load(
        cls,
        directory: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> AppConfig:
        """Resolve every option from ``<directory>/.env`` overlaid by ``environ``.

        Process environment values take precedence over the file, the same
        way ``load_dotenv`` leaves already-exported variables untouched.
        Raises ``ConfigurationError`` when the completion call is enabled but
        no API key is available.
        """
        working_directory = Path(directory) if directory is not None else _current_directory()
        values = _merge_sources(
            _load_env_file(working_directory / ENV_FILE_NAME),
            os.environ if environ is None else environ,
        )

        config = cls(
            api_key=_to_optional_string(values.get("OPENAI_API_KEY")),
            model=_to_optional_string(values.get("OPENAI_MODEL")) or DEFAULT_MODEL,
            api_url=_to_optional_string(values.get("OPENAI_API_URL")) or DEFAULT_API_URL,
            timeout=_to_positive_float(
                values.get("OPENAI_TIMEOUT_SECONDS"),
                default=DEFAULT_TIMEOUT_SECONDS,
            ),
            enable_openai=_to_bool(values.get("ENABLE_OPENAI"), default=True),
            debug_request=_to_bool(values.get("DEBUG_REQUEST"), default=False),
            include_shell_history=_to_bool(values.get("INCLUDE_SHELL_HISTORY"), default=True),
            include_repository_files=_to_bool(
                values.get("INCLUDE_REPOSITORY_FILES"), default=True
            ),
            include_env_keys=_to_bool(values.get("INCLUDE_ENV_FILE_KEYS"), default=True),
            include_file_contents=_to_bool(values.get("INCLUDE_FILE_CONTENTS"), default=False),
            history_hours=_to_positive_int(
                values.get("HOURS_OF_SHELL_HISTORY") or values.get("TIME_BACK_HOURS"),
                default=DEFAULT_HISTORY_HOURS,
            ),
            max_file_count=_to_positive_int(
                values.get("MAX_FILE_COUNT_FOR_CONTEXT") or values.get("MAX_FILE_CONTEXT"),
                default=DEFAULT_MAX_FILE_COUNT,
            ),
            max_file_content_chars=_to_positive_int(
                values.get("MAX_FILE_CONTENT_CHARS"),
                default=DEFAULT_MAX_FILE_CONTENT_CHARS,
            ),
            shell_history_file=_resolve_history_file(values),
            log_level=_to_log_level(values.get("LOG_LEVEL")),
            working_directory=str(working_directory),
        )
        if config.enable_openai and not config.api_key:
            msg = (
                "OPENAI_API_KEY is required when ENABLE_OPENAI is true; "
                f"set it in {config.env_file_path} or the environment"
            )
            raise ConfigurationError(msg)
        return config


def _current_directory() -> Path:
    try:
        return Path.cwd()
    except OSError as exc:
        raise FileAccessError(f"Working directory is not readable: {exc}") from exc


def _load_env_file(path: Path) -> dict[str, str]:
    if not path.is_file():
        LOGGER.debug("env_file_missing", extra={"path": str(path)})
        return {}
    try:
        parsed = dotenv_values(path)
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("env_file_unreadable", extra={"path": str(path), "error": str(exc)})
        return {}
    return {key: value for key, value in parsed.items() if value is not None}


def _merge_sources(
    file_values: Mapping[str, str], environ: Mapping[str, str]
) -> dict[str, str]:
    merged: dict[str, str] = dict(file_values)
    merged.update(environ)
    return merged


def _to_optional_string(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _resolve_history_file(values: Mapping[str, str]) -> str:
    explicit = _to_optional_string(values.get("SHELL_HISTORY_FILE")) or _to_optional_string(
        values.get("HISTFILE")
    )
    if explicit:
        return str(Path(explicit).expanduser())

    shell = values.get("SHELL", "")
    if "bash" in shell:
        return str(Path("~/.bash_history").expanduser())
    return str(Path("~/.zsh_history").expanduser())


def _to_log_level(value: str | None) -> str:
    normalized = (value or "").strip().upper()
    return normalized if normalized in _LOG_LEVELS else "WARNING"


def _to_positive_int(value: object, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    if isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return default
        return parsed if parsed > 0 else default
    return default


def _to_positive_float(value: object, *, default: float) -> float:
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return default
        return parsed if parsed > 0 else default
    return default
