import json
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import pytest

from app.config import build_ai_search_settings
from tool_box.tools_impl.web_search.client import AiSearchClient


def chat_body(content: Optional[str]) -> str:
    return json.dumps({"choices": [{"message": {"role": "assistant", "content": content}}]})


def sse_event(content: str) -> bytes:
    payload = {"choices": [{"delta": {"content": content}}]}
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n".encode("utf-8")


class FakeResponse:
    def __init__(self, status: int = 200, body: str = "", chunks: Optional[List[bytes]] = None, fail_after: Optional[Exception] = None):
        self.status = status
        self._body = body
        self._chunks = chunks or []
        self._fail_after = fail_after
        self.released = False

    async def text(self) -> str:
        return self._body

    async def iter_chunks(self):
        for chunk in self._chunks:
            yield chunk
        if self._fail_after is not None:
            raise self._fail_after


class FakeTransport:
    """Replays scripted responses; an Exception entry is raised instead."""

    def __init__(self, *script: Any, by_query: Optional[Dict[str, Any]] = None):
        self.script = list(script)
        self.by_query = by_query or {}
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[FakeResponse] = []

    def _next(self, payload: Dict[str, Any]) -> Any:
        user_content = payload["messages"][-1]["content"]
        if user_content in self.by_query:
            return self.by_query[user_content]
        if len(self.script) > 1:
            return self.script.pop(0)
        return self.script[0]

    @asynccontextmanager
    async def post(self, url, *, headers, payload, timeout):
        self.calls.append({"url": url, "headers": dict(headers), "payload": payload, "timeout": timeout})
        entry = self._next(payload)
        if isinstance(entry, Exception):
            raise entry
        self.responses.append(entry)
        try:
            yield entry
        finally:
            entry.released = True


@pytest.fixture
def make_settings():
    def _make(**overrides):
        values = {
            "api_url": "https://api.example.com",
            "api_key": "sk-test",
            "model_id": "search-model",
            "retry_count": 1,
        }
        values.update(overrides)
        return build_ai_search_settings(**values)

    return _make


@pytest.fixture
def make_client(make_settings):
    def _make(transport, **overrides):
        return AiSearchClient(make_settings(**overrides), transport=transport, retry_delay=0)

    return _make
