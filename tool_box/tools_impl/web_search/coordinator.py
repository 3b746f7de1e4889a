"""Multi-dimension search: run planned sub-queries concurrently and assemble a report."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Sequence

from app.prompts.ai_search import SUB_QUERY_FAILED_SECTION, SUB_QUERY_RESULT_SECTION

from .client import AiSearchClient
from .exceptions import WebSearchError
from .models import DimensionResult
from .planner import split_query, strip_sub_query_marker
from .transport import PROVIDER

logger = logging.getLogger(__name__)


def _error_text(exc: BaseException) -> str:
    if isinstance(exc, WebSearchError):
        return exc.message
    return str(exc) or type(exc).__name__


async def run_sub_queries(client: AiSearchClient, sub_queries: Sequence[str]) -> List[DimensionResult]:
    """Settle every sub-query; results keep the planner's order."""
    questions = [strip_sub_query_marker(sq) for sq in sub_queries]
    outcomes = await asyncio.gather(
        *(client.search(question) for question in questions),
        return_exceptions=True,
    )

    results: List[DimensionResult] = []
    for index, (question, outcome) in enumerate(zip(questions, outcomes), start=1):
        if isinstance(outcome, BaseException):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            results.append(DimensionResult(index=index, question=question, error=_error_text(outcome)))
        else:
            results.append(DimensionResult(index=index, question=question, answer=outcome))
    return results


def assemble_report(results: Sequence[DimensionResult]) -> str:
    sections: List[str] = []
    for result in results:
        if result.succeeded:
            sections.append(
                SUB_QUERY_RESULT_SECTION.format(index=result.index, question=result.question, answer=result.answer)
            )
        else:
            sections.append(
                SUB_QUERY_FAILED_SECTION.format(index=result.index, question=result.question, error=result.error)
            )
    return "".join(sections)


async def multi_dimension_search(client: AiSearchClient, query: str) -> str:
    logger.info("[AI Search] multi-dimension search: planning %d sub-queries", client.settings.max_query_plan)

    sub_queries = await split_query(client, query)
    logger.info("[AI Search] query split into %d sub-queries", len(sub_queries))

    started = time.monotonic()
    results = await run_sub_queries(client, sub_queries)
    elapsed_ms = int((time.monotonic() - started) * 1000)

    success_count = sum(1 for r in results if r.succeeded)
    logger.info(
        "[AI Search] sub-queries settled: %d succeeded, %d failed, %dms",
        success_count,
        len(results) - success_count,
        elapsed_ms,
    )

    if success_count == 0:
        raise WebSearchError(
            code="all_sub_queries_failed",
            message="All sub-queries failed",
            provider=PROVIDER,
            meta={"errors": [r.error for r in results]},
        )

    return assemble_report(results)
