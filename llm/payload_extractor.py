from __future__ import annotations

import json
from typing import Any, Optional

from langchain_core.messages import BaseMessage
from pydantic import BaseModel

from llm.errors import EmptyResponseError, RefusedError
from llm.json_sanitizer import sanitize_json_response

# Keys that wrap text inside a structured content part, in lookup order
_WRAPPER_KEYS = ("text", "content", "arguments")


class CompletionPayload(BaseModel):
    """Textual payload of one completion call, before and after sanitising."""

    raw: str
    cleaned: str


def flatten_content(content: Any) -> str:
    """
    Concatenate every textual fragment of a message's content.

    Supported shapes: a plain string, a list of parts (strings or wrappers),
    or a dict wrapper carrying ``text``, ``content`` or ``arguments``.
    Anything else contributes nothing.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(flatten_content(part) for part in content)
    if isinstance(content, dict):
        for key in _WRAPPER_KEYS:
            if key in content:
                return flatten_content(content[key])
    return ""


def _tool_call_arguments(message: BaseMessage) -> Optional[str]:
    # Raw OpenAI tool calls keep the argument string exactly as generated
    for call in message.additional_kwargs.get("tool_calls") or []:
        if not isinstance(call, dict) or call.get("type", "function") != "function":
            continue
        arguments = (call.get("function") or {}).get("arguments")
        if isinstance(arguments, str) and arguments.strip():
            return arguments

    # Providers that only expose LangChain's parsed tool calls
    for call in getattr(message, "tool_calls", None) or []:
        args = call.get("args")
        if args:
            return json.dumps(args)

    return None


def extract_payload(message: BaseMessage) -> CompletionPayload:
    """
    Locate the model's answer regardless of completion mode.

    Order: message content, then function-call arguments, then refusal.
    Raises RefusedError when the model declined and EmptyResponseError when
    nothing usable came back.
    """
    content = flatten_content(message.content)
    if content.strip():
        return CompletionPayload(raw=content, cleaned=sanitize_json_response(content))

    arguments = _tool_call_arguments(message)
    if arguments:
        return CompletionPayload(raw=arguments, cleaned=sanitize_json_response(arguments))

    refusal = message.additional_kwargs.get("refusal")
    if isinstance(refusal, str) and refusal.strip():
        raise RefusedError(refusal.strip())

    raise EmptyResponseError()
