"""Reduce chat-completion responses (JSON body or SSE stream) to plain text."""

from __future__ import annotations

import codecs
import json
import re
from typing import Any, AsyncIterable, List, Optional

from .exceptions import WebSearchError
from .transport import PROVIDER

SSE_DATA_PREFIX = "data:"
SSE_DONE = "[DONE]"

_THINK_RE = re.compile(r"<think>[\s\S]*?</think>", re.IGNORECASE)
_THINKING_RE = re.compile(r"<thinking>[\s\S]*?</thinking>", re.IGNORECASE)
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def filter_thinking_content(content: str) -> str:
    """Strip <think>/<thinking> blocks and squeeze runs of blank lines."""
    result = _THINK_RE.sub("", content)
    result = _THINKING_RE.sub("", result)
    result = _BLANK_LINES_RE.sub("\n\n", result)
    return result.strip()


def _first_choice(payload: Any) -> Optional[dict]:
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    return choice if isinstance(choice, dict) else None


def extract_message_content(payload: Any) -> Optional[str]:
    choice = _first_choice(payload)
    if choice is None:
        return None
    message = choice.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def extract_delta_content(payload: Any) -> Optional[str]:
    choice = _first_choice(payload)
    if choice is None:
        return None
    delta = choice.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) else None


def _malformed(message: str, **meta: Any) -> WebSearchError:
    return WebSearchError(
        code="malformed_response",
        message=message,
        provider=PROVIDER,
        meta=meta,
    )


def reduce_json_body(raw_text: str) -> str:
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise _malformed(f"Invalid JSON response: {exc}") from exc

    content = extract_message_content(data)
    if not content:
        raise _malformed("Malformed API response: no answer content returned")
    return content


def parse_sse_line(line: str) -> Optional[str]:
    """Return the delta text carried by one SSE line, if any."""
    line = line.strip()
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    data = line[len(SSE_DATA_PREFIX):].strip()
    if not data or data == SSE_DONE:
        return None
    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        return None
    return extract_delta_content(payload)


async def reduce_event_stream(chunks: AsyncIterable[bytes]) -> str:
    """Concatenate delta content from an SSE byte stream in arrival order.

    Chunks may split lines (and multi-byte characters) anywhere, so text is
    decoded incrementally and only complete lines are parsed.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    fragments: List[str] = []
    buffer = ""

    async for chunk in chunks:
        buffer += decoder.decode(chunk)
        lines = buffer.split("\n")
        buffer = lines.pop()
        for line in lines:
            content = parse_sse_line(line)
            if content:
                fragments.append(content)

    buffer += decoder.decode(b"", final=True)
    if buffer:
        content = parse_sse_line(buffer)
        if content:
            fragments.append(content)

    return "".join(fragments)
