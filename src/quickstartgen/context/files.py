"""Repository file listing used to show the model the shape of the project."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from pathlib import Path

from quickstartgen.errors import FileAccessError

LOGGER = logging.getLogger(__name__)

PROJECT_MANIFESTS: dict[str, str] = {
    "Cargo.toml": "Rust",
    "pyproject.toml": "Python",
    "setup.py": "Python",
    "requirements.txt": "Python",
    "package.json": "Node.js",
    "go.mod": "Go",
    "pom.xml": "Java (Maven)",
    "build.gradle": "Java (Gradle)",
    "Gemfile": "Ruby",
    "composer.json": "PHP",
    "CMakeLists.txt": "C/C++ (CMake)",
    "Makefile": "Make",
    "Dockerfile": "Docker",
}

SKIPPED_DIRECTORIES = frozenset(
    {
        "node_modules",
        "target",
        "__pycache__",
        "venv",
        "env",
        "dist",
        "build",
        "site-packages",
    }
)


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _check_root(root: Path) -> None:
    if not root.is_dir():
        raise FileAccessError(f"Working directory is not a readable directory: {root}")
    try:
        with os.scandir(root):
            pass
    except OSError as exc:
        raise FileAccessError(f"Working directory is not readable: {root}: {exc}") from exc


def _walk_files(root: Path) -> Iterator[str]:
    """Yield relative POSIX paths of regular files, depth-first in sorted order."""

    def _on_error(exc: OSError) -> None:
        LOGGER.debug(
            "repository_path_unreadable",
            extra={"path": getattr(exc, "filename", None), "error": str(exc)},
        )

    for current, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = sorted(
            name for name in dirnames if not _is_hidden(name) and name not in SKIPPED_DIRECTORIES
        )
        current_path = Path(current)
        for filename in sorted(filenames):
            if _is_hidden(filename):
                continue
            file_path = current_path / filename
            if not file_path.is_file():
                continue
            yield file_path.relative_to(root).as_posix()


def detect_project_types(root: str | Path) -> tuple[str, ...]:
    """Return project type labels for the manifests present at the root."""
    root_path = Path(root)
    detected: list[str] = []
    for manifest, project_type in PROJECT_MANIFESTS.items():
        if (root_path / manifest).is_file() and project_type not in detected:
            detected.append(project_type)
    return tuple(detected)


def scan_repository_files(root: str | Path, max_count: int) -> tuple[str, ...]:
    """List up to ``max_count`` files under ``root``.

    Root manifests come first, followed by the remaining files in walk order.
    Hidden entries and vendored or build output directories are skipped, as
    are sub-directories that cannot be read. Raises ``FileAccessError`` if the
    root itself cannot be read.
    """
    root_path = Path(root)
    _check_root(root_path)
    if max_count <= 0:
        return ()

    selected: list[str] = [
        manifest for manifest in PROJECT_MANIFESTS if (root_path / manifest).is_file()
    ][:max_count]
    seen = set(selected)
    if len(selected) < max_count:
        for relative_path in _walk_files(root_path):
            if relative_path in seen:
                continue
            selected.append(relative_path)
            seen.add(relative_path)
            if len(selected) >= max_count:
                break

    LOGGER.debug(
        "repository_files_scanned",
        extra={"root": str(root_path), "files": len(selected), "max_count": max_count},
    )
    return tuple(selected)


def read_file_excerpts(
    root: str | Path, paths: Sequence[str], max_chars: int
) -> tuple[tuple[str, str], ...]:
    """Read the leading ``max_chars`` characters of each text file in ``paths``."""
    root_path = Path(root)
    excerpts: list[tuple[str, str]] = []
    for relative_path in paths:
        file_path = root_path / relative_path
        try:
            with file_path.open("r", encoding="utf-8") as fh:
                content = fh.read(max_chars + 1)
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.debug(
                "file_excerpt_skipped", extra={"path": relative_path, "error": str(exc)}
            )
            continue
        if "\x00" in content:
            continue
        if len(content) > max_chars:
            content = f"{content[:max_chars]}..."
        excerpts.append((relative_path, content))
    return tuple(excerpts)
