from __future__ import annotations

import os
from pathlib import Path

import pytest

from quickstartgen.context.files import (
    detect_project_types,
    read_file_excerpts,
    scan_repository_files,
)
from quickstartgen.errors import FileAccessError


def _touch(root: Path, relative: str, content: str = "") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_scan_lists_manifests_first_then_sorted_walk(tmp_path: Path) -> None:
    _touch(tmp_path, "README.md")
    _touch(tmp_path, "src/main.rs")
    _touch(tmp_path, "src/lib.rs")
    _touch(tmp_path, "Cargo.toml")

    files = scan_repository_files(tmp_path, 10)

    assert files == ("Cargo.toml", "README.md", "src/lib.rs", "src/main.rs")


def test_scan_never_exceeds_max_count(tmp_path: Path) -> None:
    for index in range(12):
        _touch(tmp_path, f"module_{index:02d}.py")

    files = scan_repository_files(tmp_path, 5)

    assert len(files) == 5
    assert files == tuple(f"module_{index:02d}.py" for index in range(5))


def test_scan_is_deterministic(tmp_path: Path) -> None:
    for name in ("b.txt", "a.txt", "nested/z.txt", "nested/c.txt", "package.json"):
        _touch(tmp_path, name)

    assert scan_repository_files(tmp_path, 4) == scan_repository_files(tmp_path, 4)


def test_scan_skips_hidden_and_vendor_directories(tmp_path: Path) -> None:
    _touch(tmp_path, ".git/config")
    _touch(tmp_path, ".env", "SECRET=1")
    _touch(tmp_path, "node_modules/pkg/index.js")
    _touch(tmp_path, "__pycache__/mod.pyc")
    _touch(tmp_path, "app.py")

    assert scan_repository_files(tmp_path, 10) == ("app.py",)


def test_scan_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(FileAccessError):
        scan_repository_files(tmp_path / "missing", 5)


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions")
def test_scan_skips_unreadable_subdirectory(tmp_path: Path) -> None:
    _touch(tmp_path, "locked/secret.txt")
    _touch(tmp_path, "visible.txt")
    locked = tmp_path / "locked"
    locked.chmod(0)
    try:
        files = scan_repository_files(tmp_path, 10)
    finally:
        locked.chmod(0o755)

    assert files == ("visible.txt",)


def test_detect_project_types(tmp_path: Path) -> None:
    _touch(tmp_path, "pyproject.toml")
    _touch(tmp_path, "requirements.txt")
    _touch(tmp_path, "Dockerfile")

    assert detect_project_types(tmp_path) == ("Python", "Docker")


def test_read_file_excerpts_truncates_and_skips_binary(tmp_path: Path) -> None:
    _touch(tmp_path, "long.txt", "x" * 50)
    _touch(tmp_path, "short.txt", "hello\n")
    (tmp_path / "blob.bin").write_bytes(b"\x00\x01\x02")

    excerpts = read_file_excerpts(tmp_path, ["long.txt", "short.txt", "blob.bin", "gone.txt"], 10)

    assert excerpts == (("long.txt", "x" * 10 + "..."), ("short.txt", "hello\n"))
