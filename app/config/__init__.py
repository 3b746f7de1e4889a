from .search_config import (
    AiSearchSettings,
    build_ai_search_settings,
    get_ai_search_settings,
    reset_ai_search_settings_cache,
)

__all__ = [
    "AiSearchSettings",
    "build_ai_search_settings",
    "get_ai_search_settings",
    "reset_ai_search_settings_cache",
]
