"""Value records passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from quickstartgen.errors import ApiError, NetworkError

FailureKind = Literal["timeout", "transport", "http_status", "malformed_response"]

NETWORK_FAILURES: frozenset[str] = frozenset({"timeout", "transport"})


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A single shell command recorded with its start time."""

    command: str
    timestamp: datetime
    duration_seconds: int | None = None


@dataclass(frozen=True, slots=True)
class ContextBlock:
    """Labelled section of gathered context inserted into the prompt."""

    label: str
    lines: tuple[str, ...]

    def render(self) -> str:
        return "\n".join([f"{self.label}:", *self.lines])


@dataclass(frozen=True, slots=True)
class Prompt:
    """Instruction and user content handed to the completion client."""

    system: str
    user: str


@dataclass(frozen=True, slots=True)
class CompletionResult:
    """Outcome of a completion call, successful or not."""

    text: str | None
    request_body: str
    failure_kind: FailureKind | None = None
    failure_reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure_kind is None and self.text is not None

    def raise_for_failure(self) -> None:
        """Raise the matching pipeline error when the call failed."""
        if self.ok:
            return
        reason = f"{self.failure_kind}: {self.failure_reason or 'completion request failed'}"
        if self.failure_kind in NETWORK_FAILURES:
            raise NetworkError(reason)
        raise ApiError(reason)
