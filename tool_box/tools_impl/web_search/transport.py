"""HTTP transport for OpenAI compatible chat-completion endpoints."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncContextManager, AsyncIterator, Dict, Mapping, Optional, Protocol

import aiohttp

from .exceptions import WebSearchError

logger = logging.getLogger(__name__)

PROVIDER = "ai_search"


class TransportResponse(Protocol):
    """Structured view of one HTTP response."""

    status: int

    async def text(self) -> str:
        ...

    def iter_chunks(self) -> AsyncIterator[bytes]:
        ...


class ChatTransport(Protocol):
    def post(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        payload: Dict[str, Any],
        timeout: float,
    ) -> AsyncContextManager[TransportResponse]:
        ...


def _transport_error(exc: BaseException) -> WebSearchError:
    message = str(exc).strip() or f"{type(exc).__name__}"
    return WebSearchError(
        code="transport_error",
        message=f"Network request failed: {message}",
        provider=PROVIDER,
    )


def _timeout_error(timeout: Optional[float]) -> WebSearchError:
    return WebSearchError(
        code="request_timeout",
        message=f"Request timed out after {timeout}s",
        provider=PROVIDER,
        meta={"timeout": timeout},
    )


class AiohttpResponse:
    def __init__(self, response: aiohttp.ClientResponse, timeout: float) -> None:
        self._response = response
        self._timeout = timeout
        self.status = response.status

    async def text(self) -> str:
        try:
            return await self._response.text()
        except asyncio.TimeoutError as exc:
            raise _timeout_error(self._timeout) from exc
        except aiohttp.ClientError as exc:
            raise _transport_error(exc) from exc

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.content.iter_any():
                yield chunk
        except asyncio.TimeoutError as exc:
            raise _timeout_error(self._timeout) from exc
        except aiohttp.ClientError as exc:
            raise _transport_error(exc) from exc


class AiohttpTransport:
    """Opens one aiohttp session per request; the response is released on exit."""

    def __init__(self, *, trust_env: bool = True) -> None:
        self.trust_env = trust_env

    @asynccontextmanager
    async def post(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        payload: Dict[str, Any],
        timeout: float,
    ) -> AsyncIterator[AiohttpResponse]:
        client_timeout = aiohttp.ClientTimeout(total=timeout)
        try:
            async with aiohttp.ClientSession(timeout=client_timeout, trust_env=self.trust_env) as session:
                async with session.post(url, headers=dict(headers), json=payload) as response:
                    yield AiohttpResponse(response, timeout)
        except asyncio.TimeoutError as exc:
            raise _timeout_error(timeout) from exc
        except aiohttp.ClientError as exc:
            logger.debug("AI Search transport failure for %s: %s", url, exc)
            raise _transport_error(exc) from exc
