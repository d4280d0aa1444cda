"""Compose gathered context into the quickstart prompt."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from quickstartgen.config import AppConfig
from quickstartgen.models import ContextBlock, HistoryEntry, Prompt

SYSTEM_PROMPT_PARTS = [
    (
        "You are a helpful assistant who is excellent at building projects from the"
        " ground up and understanding how a user would need a readable quickstart"
        " section to get started."
    ),
    "Ensure that the guide is strictly relevant to the detected project type.",
    (
        "Only consider relevant commands and files for the detected project type."
        " If it is a Rust project, do not include Node.js or npm-related instructions."
        " If it is a Python project, do not include Rust-related instructions."
    ),
    (
        "Only output the Markdown content without any explanation, preamble, or"
        " additional context. Do not include triple backticks before or after the output."
    ),
    (
        "If environment variable names were provided, also include instructions on"
        " setting up the environment."
    ),
    "If a project description was included in any manifest file, include it under the heading.",
]

INSTRUCTION_TEMPLATE = (
    "I'm building a project and I want to build a quickstart guide for my README.md."
    " The commands that I ran are included, but could also contain commands that don't"
    " apply to this project. Using the context below as reference, write a quickstart"
    " guide that lists the commands needed to get started on this project."
)


def build_system_prompt() -> str:
    return " ".join(SYSTEM_PROMPT_PARTS)


def format_relative(seconds: float) -> str:
    """Render an elapsed duration as ``1h 5m`` style text."""
    remaining = max(int(seconds), 0)
    days, remaining = divmod(remaining, 86400)
    hours, remaining = divmod(remaining, 3600)
    minutes, secs = divmod(remaining, 60)
    parts = [
        f"{value}{unit}"
        for value, unit in ((days, "d"), (hours, "h"), (minutes, "m"))
        if value
    ]
    if not parts:
        return f"{secs}s"
    return " ".join(parts)


def history_block(
    entries: Sequence[HistoryEntry], *, hours: int, now: datetime
) -> ContextBlock | None:
    if not entries:
        return None
    lines = []
    for entry in entries:
        elapsed = format_relative((now - entry.timestamp).total_seconds())
        stamp = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        lines.append(f"- {stamp} UTC ({elapsed} ago): {entry.command}")
    return ContextBlock(label=f"Recent shell history (last {hours} hours)", lines=tuple(lines))


def listing_block(label: str, items: Sequence[str]) -> ContextBlock | None:
    if not items:
        return None
    return ContextBlock(label=label, lines=tuple(f"- {item}" for item in items))


def excerpts_block(excerpts: Sequence[tuple[str, str]]) -> ContextBlock | None:
    if not excerpts:
        return None
    lines: list[str] = []
    for path, content in excerpts:
        lines.append(f"--- {path} ---")
        lines.append(content.rstrip("\n"))
    return ContextBlock(label="File contents", lines=tuple(lines))


def build_prompt(
    config: AppConfig,
    *,
    history: Sequence[HistoryEntry] = (),
    files: Sequence[str] = (),
    env_keys: Sequence[str] = (),
    env_file_keys: Sequence[str] = (),
    project_types: Sequence[str] = (),
    file_excerpts: Sequence[tuple[str, str]] = (),
    now: datetime,
) -> Prompt:
    """Build the prompt from whichever context blocks are enabled and non-empty.

    A disabled toggle and an empty input are treated the same way: the block
    is dropped without leaving a heading behind.
    """
    blocks: list[ContextBlock | None] = []
    if config.include_repository_files:
        blocks.append(listing_block("Detected project types", project_types))
    if config.include_shell_history:
        blocks.append(history_block(history, hours=config.history_hours, now=now))
    if config.include_repository_files:
        blocks.append(listing_block("Project files", files))
        if config.include_file_contents:
            blocks.append(excerpts_block(file_excerpts))
    if config.include_env_keys:
        blocks.append(listing_block("Environment variable names", env_keys))
        blocks.append(listing_block(".env file keys", env_file_keys))

    sections = [INSTRUCTION_TEMPLATE]
    sections.extend(block.render() for block in blocks if block is not None)
    return Prompt(system=build_system_prompt(), user="\n\n".join(sections))
