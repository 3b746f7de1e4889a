"""
Web Search tool package.

Expose the tool definition and handler compatible with existing toolbox integration.
"""

from typing import Any, Dict, Optional

from app.config import AiSearchSettings, get_ai_search_settings
from app.prompts.ai_search import TOOL_DESCRIPTION_MULTI, TOOL_DESCRIPTION_SINGLE

from .handler import web_search_handler


def build_tool_description(settings: AiSearchSettings) -> str:
    if settings.max_query_plan == 1:
        return TOOL_DESCRIPTION_SINGLE.format(model_id=settings.model_id)
    return TOOL_DESCRIPTION_MULTI.format(model_id=settings.model_id, count=settings.max_query_plan)


def build_web_search_tool(settings: Optional[AiSearchSettings] = None) -> Dict[str, Any]:
    """Build the tool definition; the description depends on the query plan size."""
    settings = settings or get_ai_search_settings()
    return {
        "name": "web_search",
        "description": build_tool_description(settings),
        "category": "information_retrieval",
        "parameters_schema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query content",
                },
            },
            "required": ["query"],
        },
        "handler": web_search_handler,
        "tags": [
            "search",
            "web",
            "information",
            "retrieval",
            "ai",
        ],
        "examples": [
            "Search for the latest AI news",
            "Weather forecast for this week",
            "Compare the latest releases of two frameworks",
        ],
    }


def __getattr__(name: str) -> Any:
    # web_search_tool is built on first access so the description reflects the loaded settings
    if name == "web_search_tool":
        return build_web_search_tool()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["web_search_tool", "build_web_search_tool", "build_tool_description", "web_search_handler"]
