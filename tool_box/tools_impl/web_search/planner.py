"""Split a complex query into independent sub-queries with one meta request."""

from __future__ import annotations

import json
import logging
import re
from typing import List

from app.prompts.ai_search import SPLIT_SYSTEM_PROMPT, SPLIT_USER_TEMPLATE

from .client import AiSearchClient
from .exceptions import WebSearchError
from .transport import PROVIDER

logger = logging.getLogger(__name__)

SUB_QUERY_MARKER = "[SUB_QUERY]"

_MARKER_RE = re.compile(r"^\[SUB_QUERY\]\s*")
_FENCE_OPEN_JSON_RE = re.compile(r"^```json\s*", re.IGNORECASE)
_FENCE_OPEN_RE = re.compile(r"^```\s*")
_FENCE_CLOSE_RE = re.compile(r"\s*```$")


def is_sub_query(query: str) -> bool:
    return query.startswith(SUB_QUERY_MARKER)


def mark_sub_query(query: str) -> str:
    return f"{SUB_QUERY_MARKER} {query}"


def strip_sub_query_marker(query: str) -> str:
    return _MARKER_RE.sub("", query, count=1)


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    cleaned = _FENCE_OPEN_JSON_RE.sub("", cleaned, count=1)
    cleaned = _FENCE_OPEN_RE.sub("", cleaned, count=1)
    cleaned = _FENCE_CLOSE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_plan(raw: str) -> List[str]:
    """Parse the planner's reply into marker-tagged sub-queries."""
    cleaned = strip_code_fence(raw)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.error("[AI Search] could not parse sub-queries, raw response: %s", raw)
        raise WebSearchError(
            code="decomposition_failed",
            message=f"Failed to parse sub-queries, response content: {cleaned}",
            provider=PROVIDER,
        ) from exc

    questions: List[str] = []
    if isinstance(parsed, list):
        # entries that are not non-empty strings are dropped
        questions = [item.strip() for item in parsed if isinstance(item, str) and item.strip()]

    if not questions:
        raise WebSearchError(
            code="decomposition_failed",
            message="The query could not be split into any sub-queries",
            provider=PROVIDER,
            meta={"response": cleaned},
        )

    return [mark_sub_query(question) for question in questions]


async def split_query(client: AiSearchClient, query: str) -> List[str]:
    settings = client.settings
    prompt = SPLIT_USER_TEMPLATE.format(count=settings.max_query_plan, query=query)
    model_id = settings.planner_model_id
    logger.info("[AI Search] splitting query with model %s", model_id)

    response = await client.complete(prompt, SPLIT_SYSTEM_PROMPT, model_id)
    return parse_plan(response)
