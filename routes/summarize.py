"""Summarization endpoint. Always answers 200 with ``{"ok": ...}``."""

from fastapi import APIRouter, Depends, Query

from link_summarizer.dispatcher import Summarizer
from link_summarizer.schemas import SummarizeResult

from .helpers import get_summarizer, run_async_task

router = APIRouter()


@router.get("/", response_model=SummarizeResult, response_model_exclude_unset=True)
@router.get("/summarize", response_model=SummarizeResult, response_model_exclude_unset=True)
async def summarize(
    url: str | None = Query(default=None, description="Webpage or video URL"),
    summarizer: Summarizer = Depends(get_summarizer),
):
    if url is None:
        return SummarizeResult.failure().to_response()

    result: SummarizeResult = await run_async_task(summarizer.handle, url)
    return result.to_response()
