"""
AI Search tool handler.

Single entry point for the `web_search` tool. Always returns a tool-result
payload; failures are reported with `isError` set instead of raised.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from app.config import AiSearchSettings, get_ai_search_settings
from app.prompts.ai_search import CONFIG_GUIDANCE, CONFIG_INCOMPLETE_MESSAGE

from .client import AiSearchClient
from .coordinator import multi_dimension_search
from .exceptions import WebSearchError
from .planner import is_sub_query, strip_sub_query_marker
from .transport import PROVIDER

logger = logging.getLogger(__name__)


def _text_payload(text: str, *, is_error: bool = False) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        payload["isError"] = True
    return payload


def _error_payload(message: str) -> Dict[str, Any]:
    return _text_payload(f"AI search failed: {message}\n\n{CONFIG_GUIDANCE}", is_error=True)


async def run_search(client: AiSearchClient, query: str) -> str:
    """Route a query to the direct or multi-dimension path."""
    settings = client.settings
    if not settings.is_complete:
        raise WebSearchError(
            code="configuration_incomplete",
            message=CONFIG_INCOMPLETE_MESSAGE,
            provider=PROVIDER,
        )

    if is_sub_query(query):
        return await client.search(strip_sub_query_marker(query))
    if settings.max_query_plan > 1:
        return await multi_dimension_search(client, query)
    return await client.search(query)


async def web_search_handler(
    query: str,
    *,
    settings: Optional[AiSearchSettings] = None,
    client: Optional[AiSearchClient] = None,
) -> Dict[str, Any]:
    """
    Web search tool handler

    Args:
        query: Search query string
        settings: Settings snapshot (read from the environment if omitted)
        client: Pre-built client, mainly for tests

    Returns:
        Tool-result payload with a single text item
    """
    query_text = query.strip() if isinstance(query, str) else ""
    if not query_text:
        return _error_payload("AI Search requires a non-empty query string.")

    logger.info("[AI Search] search: %s", query_text)
    try:
        if client is None:
            client = AiSearchClient(settings or get_ai_search_settings())
        result = await run_search(client, query_text)
    except WebSearchError as exc:
        logger.warning("[AI Search] search failed (%s): %s", exc.code, exc.message)
        return _error_payload(exc.message)
    except Exception as exc:
        logger.error("[AI Search] search failed: %s", exc, exc_info=True)
        return _error_payload(str(exc) or "unknown error")

    logger.info("[AI Search] search finished, returning %d characters", len(result))
    return _text_payload(result)
