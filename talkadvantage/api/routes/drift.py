"""Topic drift endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from talkadvantage.analysis.drift import detect_topic_drift
from talkadvantage.api.deps import get_completion_client
from talkadvantage.api.models import TopicDriftRequest, TopicDriftResponse
from talkadvantage.config import settings
from talkadvantage.llm.client import CompletionClient
from talkadvantage.llm.models import UpstreamCallError
from talkadvantage.pipeline_config import LLMProvider

router = APIRouter()


@router.post("/api/ai/topic-drift", response_model=TopicDriftResponse)
async def topic_drift(
    request: TopicDriftRequest,
    client: Annotated[CompletionClient, Depends(get_completion_client)],
) -> TopicDriftResponse:
    """Decide whether the conversation moved away from the previous thought."""
    if not request.previous_thought or not request.current_thought or request.threshold is None:
        raise HTTPException(status_code=400, detail="Missing required parameters")

    # drift_model is an OpenRouter model id; the Anthropic backend uses its own default.
    model = settings.drift_model if settings.llm_provider == LLMProvider.OPENROUTER else None

    try:
        drifted = await detect_topic_drift(
            client,
            request.previous_thought,
            request.current_thought,
            request.threshold,
            model=model,
        )
    except UpstreamCallError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return TopicDriftResponse(has_drifted=drifted)
