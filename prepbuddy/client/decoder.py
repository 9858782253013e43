"""
Decode one line of the relay stream.

Lines look like `data: <payload>`. The payload is `[DONE]`, provider JSON with
choices[0].delta.content, fallback JSON with a flat `response`, or plain text.
decode_line() is pure; the read loop in session_manager acts on the result.
"""
import json
from dataclasses import dataclass

from prepbuddy.core.constants import SSE_DATA_PREFIX, SSE_DONE


@dataclass(frozen=True)
class Done:
    pass


@dataclass(frozen=True)
class Content:
    text: str


@dataclass(frozen=True)
class Raw:
    """Payload that is not JSON; appended to the message as-is."""

    text: str


@dataclass(frozen=True)
class Skip:
    pass


Decoded = Done | Content | Raw | Skip

DONE = Done()
SKIP = Skip()


def _content_of(parsed: object) -> str:
    if not isinstance(parsed, dict):
        return ""
    choices = parsed.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        delta = choices[0].get("delta")
        if isinstance(delta, dict):
            content = delta.get("content")
            if isinstance(content, str) and content:
                return content
    response = parsed.get("response")
    if isinstance(response, str):
        return response
    return ""


def decode_line(line: str) -> Decoded:
    if not line.startswith(SSE_DATA_PREFIX):
        return SKIP
    data = line[len(SSE_DATA_PREFIX):].strip()
    if data == SSE_DONE:
        return DONE
    if not data:
        return SKIP
    try:
        parsed = json.loads(data)
    except ValueError:
        return Raw(data)
    content = _content_of(parsed)
    return Content(content) if content else SKIP
