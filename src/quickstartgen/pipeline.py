"""Context gathering and the single forward pass from config to output."""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone

from quickstartgen.config import AppConfig
from quickstartgen.context.environment import collect_env_keys, read_env_file_keys
from quickstartgen.context.files import (
    detect_project_types,
    read_file_excerpts,
    scan_repository_files,
)
from quickstartgen.errors import QuickstartError
from quickstartgen.history import create_history_reader
from quickstartgen.llm.client import CompletionClient
from quickstartgen.llm.prompt import build_prompt
from quickstartgen.models import HistoryEntry, Prompt
from quickstartgen.presenter import (
    present_debug_request,
    present_error,
    present_guide,
    present_preview,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GatheredContext:
    """Context collected for one run; disabled sources stay empty."""

    history: tuple[HistoryEntry, ...] = ()
    files: tuple[str, ...] = ()
    project_types: tuple[str, ...] = ()
    file_excerpts: tuple[tuple[str, str], ...] = ()
    env_keys: tuple[str, ...] = ()
    env_file_keys: tuple[str, ...] = ()


def gather_context(
    config: AppConfig,
    *,
    now: datetime,
    environ: Mapping[str, str] | None = None,
) -> GatheredContext:
    """Run each enabled collector; raises ``FileAccessError`` for an unreadable cwd."""
    history: tuple[HistoryEntry, ...] = ()
    if config.include_shell_history:
        reader = create_history_reader(config.shell_history_file)
        history = reader.read_recent(config.history_hours, now=now)

    files: tuple[str, ...] = ()
    project_types: tuple[str, ...] = ()
    file_excerpts: tuple[tuple[str, str], ...] = ()
    if config.include_repository_files:
        files = scan_repository_files(config.working_directory, config.max_file_count)
        project_types = detect_project_types(config.working_directory)
        if config.include_file_contents:
            file_excerpts = read_file_excerpts(
                config.working_directory, files, config.max_file_content_chars
            )

    env_keys: tuple[str, ...] = ()
    env_file_keys: tuple[str, ...] = ()
    if config.include_env_keys:
        env_keys = collect_env_keys(environ)
        env_file_keys = read_env_file_keys(config.env_file_path)

    LOGGER.info(
        "context_gathered",
        extra={
            "history_entries": len(history),
            "files": len(files),
            "project_types": len(project_types),
            "env_keys": len(env_keys),
            "env_file_keys": len(env_file_keys),
        },
    )
    return GatheredContext(
        history=history,
        files=files,
        project_types=project_types,
        file_excerpts=file_excerpts,
        env_keys=env_keys,
        env_file_keys=env_file_keys,
    )


def compose_prompt(config: AppConfig, context: GatheredContext, *, now: datetime) -> Prompt:
    return build_prompt(
        config,
        history=context.history,
        files=context.files,
        env_keys=context.env_keys,
        env_file_keys=context.env_file_keys,
        project_types=context.project_types,
        file_excerpts=context.file_excerpts,
        now=now,
    )


def run(
    config: AppConfig,
    *,
    client: CompletionClient | None = None,
    now: datetime | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Gather context, build the prompt, call the API and print the outcome.

    With ``DEBUG_REQUEST`` set the request body is printed before the guide,
    or to stderr when the call fails.
    """
    reference = now or datetime.now(timezone.utc)
    try:
        context = gather_context(config, now=reference, environ=environ)
    except QuickstartError as exc:
        present_error(exc)
        return exc.exit_code

    prompt = compose_prompt(config, context, now=reference)
    completion_client = client or CompletionClient(
        api_key=config.api_key,
        model=config.model,
        api_url=config.api_url,
        timeout=config.timeout,
    )

    if not config.enable_openai:
        LOGGER.info("completion_skipped", extra={"reason": "ENABLE_OPENAI is false"})
        if config.debug_request:
            present_debug_request(completion_client.serialize_request(prompt))
        else:
            present_preview(prompt)
        return 0

    result = completion_client.complete(prompt)
    if config.debug_request:
        # a failed run keeps stdout to the error line alone
        present_debug_request(result.request_body, stream=None if result.ok else sys.stderr)

    try:
        result.raise_for_failure()
    except QuickstartError as exc:
        present_error(exc)
        return exc.exit_code

    present_guide(result.text or "")
    return 0
