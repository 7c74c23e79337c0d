"""Answer questions about stored transcripts with retrieved context."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from talkadvantage.llm.client import CompletionClient
from talkadvantage.retrieval.models import SearchResult
from talkadvantage.retrieval.vector_store import VectorStore

logger = logging.getLogger(__name__)

_SYSTEM_TEMPLATE = (
    "You are an AI assistant analyzing transcripts. Use the following context from "
    "the transcripts to answer the question. If the context doesn't contain relevant "
    "information, say so.\n\n"
    "Context:\n{context}"
)


@dataclass
class ChatAnswer:
    """Answer text plus the transcripts and context it was grounded on."""

    answer: str
    active_transcripts: list[str] = field(default_factory=list)
    context: str = ""


CHUNKS_PER_TRANSCRIPT = 2


def group_by_transcript(
    results: list[SearchResult], per_transcript: int = CHUNKS_PER_TRANSCRIPT
) -> dict[str, list[SearchResult]]:
    """Group chunk hits by transcript name, keeping the best *per_transcript* of each.

    *results* must be sorted by descending similarity; transcripts are ordered
    by their best hit.
    """
    groups: dict[str, list[SearchResult]] = {}
    for result in results:
        hits = groups.setdefault(result.document.metadata.name, [])
        if len(hits) < per_transcript:
            hits.append(result)
    return groups


def format_context(groups: dict[str, list[SearchResult]]) -> str:
    """Render grouped hits as ``From {name}:`` blocks separated by blank lines."""
    return "\n\n".join(
        f"From {name}:\n" + "\n".join(hit.document.content for hit in hits)
        for name, hits in groups.items()
    )


async def answer_question(
    client: CompletionClient,
    store: VectorStore,
    question: str,
    k: int = 3,
) -> ChatAnswer:
    """Retrieve the *k* most similar transcript chunks and ask the model about them.

    Args:
        client: Completion client.
        store: Vector store holding the session's transcripts.
        question: The user's question.
        k: Number of chunks to retrieve before grouping by transcript.

    Returns:
        A :class:`ChatAnswer`.
    """
    results = await store.search(question, k)
    groups = group_by_transcript(results)
    logger.debug("Chat search returned %d chunks from %d transcripts", len(results), len(groups))

    context = format_context(groups)
    answer = await client.complete_text(
        question,
        system=_SYSTEM_TEMPLATE.format(context=context),
        max_tokens=2000,
    )

    return ChatAnswer(
        answer=answer,
        active_transcripts=list(groups),
        context=context,
    )
