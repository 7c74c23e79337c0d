"""Chat endpoint: manage session transcripts and answer questions about them."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Annotated

import openai
from fastapi import APIRouter, Depends, HTTPException

from talkadvantage.analysis.models import Transcript
from talkadvantage.api.deps import get_completion_client, get_vector_store
from talkadvantage.api.models import ActionResponse, ChatAction, ChatRequest, ChatResponse
from talkadvantage.config import settings
from talkadvantage.llm.client import CompletionClient
from talkadvantage.llm.models import UpstreamCallError
from talkadvantage.retrieval.generation import answer_question
from talkadvantage.retrieval.indexing import add_transcripts
from talkadvantage.retrieval.vector_store import VectorStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/analysis/chat", response_model=ChatResponse | ActionResponse)
async def chat(
    request: ChatRequest,
    client: Annotated[CompletionClient, Depends(get_completion_client)],
    store: Annotated[VectorStore, Depends(get_vector_store)],
) -> ChatResponse | ActionResponse:
    """Add or remove transcripts from the session store, or ask a question.

    - ``action="deleteAll"``: empty the store.
    - ``action="add"`` / ``"remove"`` with ``transcripts``: documents are keyed
      by transcript name; each transcript is stored as overlapping chunks and
      re-adding an existing name is ignored.
    - ``question``: retrieve the most similar chunks and answer from them.
    """
    try:
        if request.action is ChatAction.DELETE_ALL:
            logger.info("Deleting all transcripts")
            store.clear()
            return ActionResponse(document_count=0)

        if request.transcripts is not None and request.action is not None:
            if request.action is ChatAction.ADD:
                logger.info("Adding %d transcripts", len(request.transcripts))
                timestamp = datetime.now(UTC).isoformat()
                await add_transcripts(
                    store,
                    (Transcript(name=t.name, text=t.text) for t in request.transcripts),
                    timestamp=timestamp,
                )
            else:
                logger.info("Removing %d transcripts", len(request.transcripts))
                store.remove_by_name(t.name for t in request.transcripts)
            return ActionResponse(document_count=len(store.document_names()))

        if request.question:
            logger.info("Processing chat question")
            result = await answer_question(client, store, request.question, k=settings.search_k)
            return ChatResponse(
                answer=result.answer,
                active_transcripts=result.active_transcripts,
                context=result.context,
            )
    except UpstreamCallError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except openai.APIError as exc:
        # Embedding calls go straight through the OpenAI SDK.
        raise HTTPException(status_code=500, detail=f"Embedding request failed: {exc}") from exc

    raise HTTPException(status_code=400, detail="No question or action provided")
