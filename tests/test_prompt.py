from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from quickstartgen.config import AppConfig
from quickstartgen.llm.prompt import INSTRUCTION_TEMPLATE, build_prompt, format_relative
from quickstartgen.models import HistoryEntry

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig.load(tmp_path, environ={"ENABLE_OPENAI": "false"})


def _history() -> list[HistoryEntry]:
    return [
        HistoryEntry(command="cargo build", timestamp=NOW - timedelta(hours=1, minutes=5)),
        HistoryEntry(command="cargo test", timestamp=NOW - timedelta(seconds=30)),
    ]


def _full_prompt(config: AppConfig):
    return build_prompt(
        config,
        history=_history(),
        files=["Cargo.toml", "src/main.rs"],
        env_keys=["HOME", "PATH"],
        env_file_keys=["OPENAI_API_KEY"],
        project_types=["Rust"],
        file_excerpts=[("Cargo.toml", "[package]\nname = \"demo\"\n")],
        now=NOW,
    )


def test_prompt_includes_enabled_blocks(config: AppConfig) -> None:
    prompt = _full_prompt(config)

    assert prompt.user.startswith(INSTRUCTION_TEMPLATE)
    assert "Recent shell history (last 5 hours):" in prompt.user
    assert "- 2024-05-01 10:55:00 UTC (1h 5m ago): cargo build" in prompt.user
    assert "(30s ago): cargo test" in prompt.user
    assert "Project files:\n- Cargo.toml\n- src/main.rs" in prompt.user
    assert "Detected project types:\n- Rust" in prompt.user
    assert "Environment variable names:\n- HOME\n- PATH" in prompt.user
    assert ".env file keys:\n- OPENAI_API_KEY" in prompt.user
    assert "File contents" not in prompt.user
    assert "quickstart" in prompt.system


def test_history_precedes_files_in_original_order(config: AppConfig) -> None:
    user = _full_prompt(config).user

    assert user.index("cargo build") < user.index("cargo test") < user.index("Project files:")


def test_disabled_toggles_leave_no_trace(config: AppConfig) -> None:
    disabled = replace(
        config,
        include_shell_history=False,
        include_repository_files=False,
        include_env_keys=False,
    )

    prompt = _full_prompt(disabled)

    assert prompt.user == INSTRUCTION_TEMPLATE


def test_empty_inputs_are_treated_like_disabled(config: AppConfig) -> None:
    prompt = build_prompt(config, now=NOW)

    assert prompt.user == INSTRUCTION_TEMPLATE


def test_single_toggle_only_removes_its_block(config: AppConfig) -> None:
    prompt = _full_prompt(replace(config, include_shell_history=False))

    assert "shell history" not in prompt.user
    assert "cargo build" not in prompt.user
    assert "Project files:" in prompt.user
    assert "Environment variable names:" in prompt.user


def test_file_contents_require_both_toggles(config: AppConfig) -> None:
    with_contents = _full_prompt(replace(config, include_file_contents=True))
    files_disabled = _full_prompt(
        replace(config, include_file_contents=True, include_repository_files=False)
    )

    assert "File contents:\n--- Cargo.toml ---\n[package]" in with_contents.user
    assert "File contents" not in files_disabled.user


def test_build_prompt_is_deterministic(config: AppConfig) -> None:
    assert _full_prompt(config) == _full_prompt(config)


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0, "0s"), (45, "45s"), (3900, "1h 5m"), (90061, "1d 1h 1m"), (-5, "0s")],
)
def test_format_relative(seconds: float, expected: str) -> None:
    assert format_relative(seconds) == expected
