"""Unit tests for mapping OpenAI SDK exceptions onto UpstreamError."""

from __future__ import annotations

import httpx
import openai

from llm.errors import (
    UpstreamAPIError,
    UpstreamAuthenticationError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
    translate_openai_error,
)

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _status_error(cls, status: int, headers: dict | None = None):
    response = httpx.Response(status, headers=headers or {}, request=_REQUEST)
    return cls("upstream said no", response=response, body=None)


def test_authentication_error():
    err = translate_openai_error(_status_error(openai.AuthenticationError, 401))
    assert isinstance(err, UpstreamAuthenticationError)
    assert err.status_code == 500
    assert err.data["error"] == "Authentication failed with OpenAI"


def test_rate_limit_reads_headers():
    err = translate_openai_error(
        _status_error(openai.RateLimitError, 429, {"retry-after": "7", "x-ratelimit-reset-requests": "2s"})
    )
    assert isinstance(err, UpstreamRateLimitError)
    assert err.status_code == 429
    assert err.data == {"retryAfter": "7", "resetTime": "2s"}


def test_rate_limit_without_headers():
    err = translate_openai_error(_status_error(openai.RateLimitError, 429))
    assert err.data == {"retryAfter": "unknown", "resetTime": "unknown"}


def test_timeout():
    err = translate_openai_error(openai.APITimeoutError(request=_REQUEST))
    assert isinstance(err, UpstreamTimeoutError)
    assert err.status_code == 504


def test_other_status_errors_keep_status_and_request_id():
    err = translate_openai_error(
        _status_error(openai.InternalServerError, 503, {"x-request-id": "req_123"})
    )
    assert isinstance(err, UpstreamAPIError)
    assert err.status_code == 503
    assert err.data == {"requestId": "req_123"}
    assert err.message == "upstream said no"


def test_connection_error_defaults_to_bad_gateway():
    err = translate_openai_error(openai.APIConnectionError(request=_REQUEST))
    assert isinstance(err, UpstreamAPIError)
    assert err.status_code == 502
