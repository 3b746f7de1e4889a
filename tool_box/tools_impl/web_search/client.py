"""
AI Search chat-completion client.

Sends one query + system prompt to an OpenAI compatible endpoint, retries
transient failures with a fixed delay and reduces the response to text.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing
from datetime import datetime
from typing import Optional

from app.config import AiSearchSettings
from app.prompts.ai_search import STATUS_HINTS

from .exceptions import WebSearchError
from .models import ChatCompletionRequest
from .reducer import filter_thinking_content, reduce_event_stream, reduce_json_body
from .transport import PROVIDER, AiohttpTransport, ChatTransport, TransportResponse

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_PATH = "/v1/chat/completions"
RETRY_DELAY_SECONDS = 1.0


def build_endpoint(api_url: str) -> str:
    """Append /v1/chat/completions unless the URL already ends with it."""
    url = api_url
    if not url.endswith(CHAT_COMPLETIONS_PATH):
        if url.endswith("/"):
            url += CHAT_COMPLETIONS_PATH.lstrip("/")
        else:
            url += CHAT_COMPLETIONS_PATH
    return url


def format_current_time(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return now.strftime("%Y-%m-%d %H:%M:%S %A")


class AiSearchClient:
    """Retrying requester for chat-completion calls."""

    def __init__(
        self,
        settings: AiSearchSettings,
        *,
        transport: Optional[ChatTransport] = None,
        retry_delay: float = RETRY_DELAY_SECONDS,
    ) -> None:
        self.settings = settings
        self.transport = transport or AiohttpTransport()
        self.retry_delay = retry_delay

    @property
    def endpoint(self) -> str:
        return build_endpoint(self.settings.api_url)

    def render_system_prompt(self, now: Optional[datetime] = None) -> str:
        return self.settings.system_prompt.replace("{current_time}", format_current_time(now))

    async def search(self, query: str) -> str:
        """Run a query with the default system prompt and search model."""
        return await self.complete(query, self.render_system_prompt(), self.settings.model_id)

    async def complete(self, query: str, system_prompt: str, model_id: str) -> str:
        retry_count = self.settings.retry_count
        attempt = 0
        while True:
            try:
                result = await self._attempt(query, system_prompt, model_id)
            except WebSearchError as exc:
                if attempt < retry_count and exc.is_retryable:
                    attempt += 1
                    logger.warning(
                        "[AI Search] request failed (%s: %s), retry %d/%d",
                        exc.code,
                        exc.message,
                        attempt,
                        retry_count,
                    )
                    await asyncio.sleep(self.retry_delay)
                    continue
                logger.error("[AI Search] request failed permanently (%s): %s", exc.code, exc.message)
                raise

            if self.settings.filter_thinking:
                return filter_thinking_content(result)
            return result

    async def _attempt(self, query: str, system_prompt: str, model_id: str) -> str:
        timeout = self.settings.timeout
        try:
            return await asyncio.wait_for(self._request(query, system_prompt, model_id), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise WebSearchError(
                code="request_timeout",
                message=f"Request timed out after {timeout}s",
                provider=PROVIDER,
                meta={"timeout": timeout},
            ) from exc

    async def _request(self, query: str, system_prompt: str, model_id: str) -> str:
        body = ChatCompletionRequest.for_query(
            model=model_id,
            system_prompt=system_prompt,
            query=query,
            stream=self.settings.stream,
        )
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_key}",
        }

        async with self.transport.post(
            self.endpoint,
            headers=headers,
            payload=body.model_dump(),
            timeout=self.settings.timeout,
        ) as response:
            if not 200 <= response.status < 300:
                raise await self._http_error(response)

            if self.settings.stream:
                async with aclosing(response.iter_chunks()) as chunks:
                    content = await reduce_event_stream(chunks)
                if not content:
                    raise WebSearchError(
                        code="malformed_response",
                        message="Malformed API response: stream carried no answer content",
                        provider=PROVIDER,
                    )
                return content

            return reduce_json_body(await response.text())

    async def _http_error(self, response: TransportResponse) -> WebSearchError:
        status = response.status
        try:
            detail = await response.text()
        except WebSearchError:
            detail = ""
        message = STATUS_HINTS.get(status) or f"API request failed ({status}): {detail}"
        return WebSearchError(
            code="http_error",
            message=message,
            provider=PROVIDER,
            status=status,
            meta={"detail": detail},
        )
