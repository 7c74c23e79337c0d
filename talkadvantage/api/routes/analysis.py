"""Transcript analysis endpoint: chunked summaries, sentiment and relations."""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from talkadvantage.analysis.models import Transcript
from talkadvantage.analysis.pipeline import analyze_transcripts
from talkadvantage.api.deps import get_completion_client
from talkadvantage.api.models import AnalyzeRequest, AnalyzeResponse, TranscriptResult
from talkadvantage.config import settings
from talkadvantage.llm.client import CompletionClient
from talkadvantage.llm.models import UpstreamCallError
from talkadvantage.pipeline_config import AnalysisConfig
from talkadvantage.storage import get_supabase_client, storage_configured, store_analysis

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/analysis/transcripts", response_model=AnalyzeResponse)
async def analyze(
    request: AnalyzeRequest,
    client: Annotated[CompletionClient, Depends(get_completion_client)],
) -> AnalyzeResponse:
    """Summarize and score the sentiment of each transcript, then relate them.

    Each transcript is split into fixed-size word chunks; every chunk gets a
    summary and a sentiment reading, which are combined per transcript.  The
    first chunk of every transcript feeds a single relation prompt.  Any
    upstream failure fails the whole request.
    """
    if not request.transcripts:
        raise HTTPException(status_code=400, detail="No transcripts provided")
    for t in request.transcripts:
        if not t.text.strip():
            raise HTTPException(
                status_code=400,
                detail=f"Transcript {t.name or '(unnamed)'!r} has no text",
            )
    if request.save and not storage_configured():
        raise HTTPException(
            status_code=501,
            detail="Saving analyses is not configured: SUPABASE_URL / SUPABASE_KEY are not set.",
        )

    transcripts = [Transcript(name=t.name, text=t.text) for t in request.transcripts]

    try:
        report = await analyze_transcripts(
            client, transcripts, AnalysisConfig.from_settings(settings)
        )
    except UpstreamCallError as exc:
        logger.error("Transcript analysis failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    analysis_ids: list[str] = []
    if request.save:
        # Supabase client is synchronous; keep it off the event loop.
        analysis_ids = await asyncio.to_thread(store_analysis, get_supabase_client(), report)

    return AnalyzeResponse(
        results=[
            TranscriptResult(
                name=r.name,
                summary=r.summary,
                sentiment=str(r.sentiment),
                confidence=r.confidence,
                chunk_count=r.chunk_count,
            )
            for r in report.results
        ],
        relation=report.relation,
        analysis_ids=analysis_ids,
    )
