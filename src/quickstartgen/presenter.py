"""Standard output rendering for guides, debug dumps and errors."""

from __future__ import annotations

from typing import TextIO

from quickstartgen.errors import QuickstartError
from quickstartgen.models import Prompt

DEBUG_HEADER = "=== Request body ==="
PREVIEW_HEADER = "=== Prompt preview (ENABLE_OPENAI is false, no request sent) ==="


def render_error(error: QuickstartError) -> str:
    return f"error [{error.kind}]: {error}"


def render_debug_request(request_body: str) -> str:
    return "\n".join([DEBUG_HEADER, request_body])


def render_preview(prompt: Prompt) -> str:
    return "\n".join(
        [
            PREVIEW_HEADER,
            "[system]",
            prompt.system,
            "",
            "[user]",
            prompt.user,
        ]
    )


def present_guide(text: str, *, stream: TextIO | None = None) -> None:
    print(text.rstrip("\n"), file=stream)


def present_debug_request(request_body: str, *, stream: TextIO | None = None) -> None:
    print(render_debug_request(request_body), file=stream)


def present_preview(prompt: Prompt, *, stream: TextIO | None = None) -> None:
    print(render_preview(prompt), file=stream)


def present_error(error: QuickstartError, *, stream: TextIO | None = None) -> None:
    print(render_error(error), file=stream)
