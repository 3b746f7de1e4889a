from typing import Any, Dict, Optional

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

# Failures that carry no status code but must never be retried
FATAL_CODES = frozenset(
    {
        "configuration_incomplete",
        "malformed_response",
        "decomposition_failed",
        "all_sub_queries_failed",
    }
)


class WebSearchError(Exception):
    """Unified Web Search error type"""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        provider: str,
        status: Optional[int] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.provider = provider
        self.status = status
        self.meta = meta or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        if self.code in FATAL_CODES:
            return False
        # no status code means the request never got a response
        if self.status is None:
            return True
        return self.status in RETRYABLE_STATUS_CODES
