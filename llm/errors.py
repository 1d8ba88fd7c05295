"""
Error taxonomy for the issue-generation pipeline.

CompletionError subclasses describe a single bad completion attempt and are
recoverable by the one-shot retry in BaseAgent.complete_with_retry.
UpstreamError subclasses describe transport failures reported by the OpenAI
SDK; they are never retried by the pipeline itself.
"""

from __future__ import annotations

from typing import Any, Optional

import openai


class ConfigurationError(RuntimeError):
    """Service is missing configuration required to reach the model."""


# ── Per-attempt failures ──────────────────────────────────────────────────────

class CompletionError(Exception):
    """A completion attempt produced no usable, schema-valid payload."""


class EmptyResponseError(CompletionError):
    def __init__(self, message: str = "Empty response from model") -> None:
        super().__init__(message)


class RefusedError(CompletionError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Model refused to answer: {reason}")


class InvalidJSONError(CompletionError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid JSON output from model: {detail}")


class SchemaViolationError(CompletionError):
    def __init__(self, field: str, detail: Optional[str] = None) -> None:
        self.field = field
        self.detail = detail or f"Missing or invalid {field}"
        super().__init__(self.detail)


class UnrecognizedIssueTypeError(Exception):
    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Unrecognized issue type: {value!r}")


# ── Upstream transport failures ───────────────────────────────────────────────

class UpstreamError(Exception):
    status_code: int = 502

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        data: Optional[dict] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.data = data or {}


class UpstreamAuthenticationError(UpstreamError):
    status_code = 500


class UpstreamRateLimitError(UpstreamError):
    status_code = 429

    def __init__(self, message: str, retry_after: str = "unknown", reset_time: str = "unknown") -> None:
        super().__init__(
            message,
            data={"retryAfter": retry_after, "resetTime": reset_time},
        )
        self.retry_after = retry_after
        self.reset_time = reset_time


class UpstreamTimeoutError(UpstreamError):
    status_code = 504


class UpstreamAPIError(UpstreamError):
    def __init__(self, message: str, status_code: Optional[int] = None, request_id: Optional[str] = None) -> None:
        super().__init__(message, status_code=status_code, data={"requestId": request_id})
        self.request_id = request_id


def _header(exc: openai.APIStatusError, name: str) -> str:
    headers = getattr(exc.response, "headers", None) or {}
    return headers.get(name) or "unknown"


def translate_openai_error(exc: openai.APIError) -> UpstreamError:
    """Map an OpenAI SDK exception onto the pipeline's UpstreamError hierarchy."""
    if isinstance(exc, openai.AuthenticationError):
        return UpstreamAuthenticationError(
            "Invalid OpenAI API key. Please check your OPENAI_API_KEY environment variable.",
            data={
                "error": "Authentication failed with OpenAI",
                "hint": "Verify the API key is correct and active at https://platform.openai.com/api-keys",
            },
        )

    if isinstance(exc, openai.RateLimitError):
        return UpstreamRateLimitError(
            "Rate limit exceeded. Please try again later.",
            retry_after=_header(exc, "retry-after"),
            reset_time=_header(exc, "x-ratelimit-reset-requests"),
        )

    if isinstance(exc, openai.APITimeoutError):
        return UpstreamTimeoutError("OpenAI request timed out")

    return UpstreamAPIError(
        exc.message or "OpenAI API error",
        status_code=getattr(exc, "status_code", None),
        request_id=getattr(exc, "request_id", None),
    )
