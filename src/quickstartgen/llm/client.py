"""Thin chat-completion client that returns the generated guide."""

from __future__ import annotations

import http.client
import json
import logging
from urllib import request
from urllib.error import HTTPError, URLError

from quickstartgen.models import CompletionResult, FailureKind, Prompt

LOGGER = logging.getLogger(__name__)


class CompletionClient:
    """Small HTTP client for a single chat-completion call."""

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str,
        api_url: str = "https://api.openai.com/v1/chat/completions",
        timeout: float = 60.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self.timeout = timeout

    def build_request_body(self, prompt: Prompt) -> dict[str, object]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
        }

    def serialize_request(self, prompt: Prompt) -> str:
        return json.dumps(self.build_request_body(prompt), indent=2, ensure_ascii=False)

    def complete(self, prompt: Prompt) -> CompletionResult:
        request_body = self.serialize_request(prompt)
        body = json.dumps(self.build_request_body(prompt)).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        LOGGER.debug(
            "completion_request_prepared",
            extra={
                "api_url": self.api_url,
                "model": self.model,
                "payload_bytes": len(body),
            },
        )

        req = request.Request(self.api_url, data=body, headers=headers, method="POST")
        try:
            with request.urlopen(req, timeout=self.timeout) as resp:  # noqa: S310
                raw_response = json.loads(resp.read().decode("utf-8"))
        except HTTPError as exc:
            body_excerpt = self._read_error_body_excerpt(exc)
            LOGGER.error(
                "completion_request_http_error",
                extra={
                    "api_url": self.api_url,
                    "model": self.model,
                    "http_status": exc.code,
                    "reason": exc.reason,
                    "response_excerpt": body_excerpt,
                },
            )
            details = f"Completion request failed with HTTP {exc.code}: {exc.reason}"
            if body_excerpt:
                details = f"{details}. Response body: {body_excerpt}"
            return self._failure(request_body, "http_status", details)
        except URLError as exc:
            if isinstance(exc.reason, TimeoutError):
                return self._timeout_failure(request_body)
            LOGGER.error(
                "completion_request_transport_error",
                extra={
                    "api_url": self.api_url,
                    "model": self.model,
                    "reason": str(exc.reason),
                },
            )
            return self._failure(
                request_body, "transport", f"Completion request transport error: {exc.reason}"
            )
        except TimeoutError:
            return self._timeout_failure(request_body)
        except (http.client.HTTPException, ConnectionError) as exc:
            # raised from getresponse() or read(), outside urllib's URLError wrapping
            LOGGER.error(
                "completion_connection_error",
                extra={
                    "api_url": self.api_url,
                    "model": self.model,
                    "error": repr(exc),
                },
            )
            return self._failure(
                request_body, "transport", f"Completion request transport error: {exc!r}"
            )
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            LOGGER.error(
                "completion_response_parse_error",
                extra={
                    "api_url": self.api_url,
                    "model": self.model,
                    "error": str(exc),
                },
            )
            return self._failure(
                request_body, "malformed_response", f"Completion response parsing error: {exc}"
            )

        content = self._extract_message_content(raw_response)
        if content is None:
            return self._failure(
                request_body,
                "malformed_response",
                "Completion response parsing error: no choices[0].message.content text",
            )

        LOGGER.info(
            "completion_received",
            extra={"model": self.model, "content_length": len(content)},
        )
        return CompletionResult(text=content, request_body=request_body)

    @staticmethod
    def _extract_message_content(payload: object) -> str | None:
        if not isinstance(payload, dict):
            return None
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first_choice = choices[0]
        if not isinstance(first_choice, dict):
            return None
        message = first_choice.get("message")
        if not isinstance(message, dict):
            return None
        content = message.get("content")
        if not isinstance(content, str):
            return None
        return content

    def _timeout_failure(self, request_body: str) -> CompletionResult:
        LOGGER.error(
            "completion_request_timeout",
            extra={
                "api_url": self.api_url,
                "model": self.model,
                "timeout_seconds": self.timeout,
            },
        )
        return self._failure(
            request_body, "timeout", f"Completion request timed out after {self.timeout:.1f}s"
        )

    @staticmethod
    def _failure(request_body: str, kind: FailureKind, reason: str) -> CompletionResult:
        return CompletionResult(
            text=None,
            request_body=request_body,
            failure_kind=kind,
            failure_reason=reason,
        )

    @staticmethod
    def _read_error_body_excerpt(exc: HTTPError, *, max_chars: int = 500) -> str | None:
        if exc.fp is None:
            return None
        try:
            raw = exc.read()
        except OSError:
            return None

        if not raw:
            return None

        excerpt = raw.decode("utf-8", errors="replace").replace("\n", " ").strip()
        if len(excerpt) > max_chars:
            return f"{excerpt[:max_chars]}..."
        return excerpt
