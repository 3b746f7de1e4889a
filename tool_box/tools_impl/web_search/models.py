"""
AI Search Wire Models

Request models for OpenAI compatible chat-completion endpoints.
"""

from dataclasses import dataclass
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """One role-tagged chat message"""

    role: Literal["system", "user", "assistant"] = Field(..., description="Message role")
    content: str = Field(..., description="Message text")


class ChatCompletionRequest(BaseModel):
    """Chat-completion request body: one system message followed by one user message"""

    model: str = Field(..., description="Model ID")
    messages: List[ChatMessage] = Field(..., description="Conversation messages")
    stream: bool = Field(default=False, description="Request an SSE stream")

    @classmethod
    def for_query(cls, *, model: str, system_prompt: str, query: str, stream: bool) -> "ChatCompletionRequest":
        return cls(
            model=model,
            messages=[
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=query),
            ],
            stream=stream,
        )


@dataclass(frozen=True)
class DimensionResult:
    """Outcome of one planned sub-query."""

    index: int
    question: str
    answer: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
