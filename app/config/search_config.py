"""
AI Search 配置

统一管理 AI Search 工具的配置：OpenAI 兼容接口地址、鉴权、模型、
超时、流式输出、思考内容过滤、重试次数以及多维度搜索的子查询数量。
"""

from dataclasses import dataclass
from functools import lru_cache
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from app.prompts.ai_search import DEFAULT_SYSTEM_PROMPT

MIN_TIMEOUT = 1
MAX_TIMEOUT = 300

DEFAULT_TIMEOUT = 60
DEFAULT_RETRY_COUNT = 1
DEFAULT_MAX_QUERY_PLAN = 1


@dataclass(frozen=True, slots=True)
class AiSearchSettings:
    """AI Search 模块配置（构造后不可变）"""

    api_url: str = ""
    api_key: str = ""
    model_id: str = ""
    analysis_model_id: Optional[str] = None
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    timeout: int = DEFAULT_TIMEOUT
    stream: bool = False
    filter_thinking: bool = True
    retry_count: int = DEFAULT_RETRY_COUNT
    max_query_plan: int = DEFAULT_MAX_QUERY_PLAN

    @property
    def is_complete(self) -> bool:
        return bool(self.api_url and self.api_key and self.model_id)

    @property
    def planner_model_id(self) -> str:
        return self.analysis_model_id or self.model_id


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is None:
        return default
    value = value.strip()
    return value or default


def _env_int(key: str, default: int) -> int:
    try:
        return int(_env(key, str(default)))
    except (TypeError, ValueError):
        return default


def _env_bool(key: str, default: bool) -> bool:
    raw = _env(key)
    if raw is None:
        return default
    return raw.lower() == "true"


def build_ai_search_settings(
    *,
    api_url: str = "",
    api_key: str = "",
    model_id: str = "",
    analysis_model_id: Optional[str] = None,
    system_prompt: Optional[str] = None,
    timeout: int = DEFAULT_TIMEOUT,
    stream: bool = False,
    filter_thinking: bool = True,
    retry_count: int = DEFAULT_RETRY_COUNT,
    max_query_plan: int = DEFAULT_MAX_QUERY_PLAN,
) -> AiSearchSettings:
    """按默认值与取值范围构造 AiSearchSettings"""

    return AiSearchSettings(
        api_url=(api_url or "").strip(),
        api_key=(api_key or "").strip(),
        model_id=(model_id or "").strip(),
        analysis_model_id=(analysis_model_id or "").strip() or None,
        system_prompt=system_prompt or DEFAULT_SYSTEM_PROMPT,
        timeout=max(MIN_TIMEOUT, min(MAX_TIMEOUT, int(timeout))),
        stream=bool(stream),
        filter_thinking=bool(filter_thinking),
        retry_count=max(0, int(retry_count)),
        max_query_plan=max(1, int(max_query_plan)),
    )


@lru_cache(maxsize=1)
def get_ai_search_settings() -> AiSearchSettings:
    """读取环境变量（含 .env）并返回 AiSearchSettings"""

    load_dotenv(find_dotenv(usecwd=True), override=False)

    return build_ai_search_settings(
        api_url=_env("AI_API_URL", "") or "",
        api_key=_env("AI_API_KEY", "") or "",
        model_id=_env("AI_MODEL_ID", "") or "",
        analysis_model_id=_env("AI_ANALYSIS_MODEL_ID"),
        system_prompt=_env("AI_SYSTEM_PROMPT"),
        timeout=_env_int("AI_TIMEOUT", DEFAULT_TIMEOUT),
        stream=_env_bool("AI_STREAM", False),
        filter_thinking=_env_bool("AI_FILTER_THINKING", True),
        retry_count=_env_int("AI_RETRY_COUNT", DEFAULT_RETRY_COUNT),
        max_query_plan=_env_int("AI_MAX_QUERY_PLAN", DEFAULT_MAX_QUERY_PLAN),
    )


def reset_ai_search_settings_cache() -> None:
    """测试场景下清理缓存"""

    get_ai_search_settings.cache_clear()  # type: ignore[attr-defined]
