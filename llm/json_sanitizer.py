"""Normalise raw model output into parseable JSON text."""

from __future__ import annotations

import re

_FENCE_OPEN = re.compile(r"```\w*\s*")
_FENCE = "```"

_NAMED_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def remove_code_fences(text: str) -> str:
    return _FENCE_OPEN.sub("", text).replace(_FENCE, "").strip()


def _escape(char: str) -> str:
    if char in _NAMED_ESCAPES:
        return _NAMED_ESCAPES[char]
    return f"\\u{ord(char):04x}"


def escape_control_characters(text: str) -> str:
    """
    Escape raw control characters that appear inside JSON string literals.

    Models regularly emit literal newlines inside "description" values.
    Characters outside string literals are left untouched.
    """
    out: list[str] = []
    in_string = False
    escape_next = False

    for char in text:
        if not in_string:
            out.append(char)
            if char == '"':
                in_string = True
            continue

        if escape_next:
            out.append(char)
            escape_next = False
            continue

        if char == "\\":
            out.append(char)
            escape_next = True
        elif char == '"':
            out.append(char)
            in_string = False
        elif ord(char) < 0x20:
            out.append(_escape(char))
        else:
            out.append(char)

    return "".join(out)


def sanitize_json_response(raw: str) -> str:
    return escape_control_characters(remove_code_fences(raw))
