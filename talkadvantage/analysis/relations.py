"""Cross-transcript relation analysis."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from talkadvantage.analysis.analyzer import SYSTEM_PROMPT
from talkadvantage.analysis.chunking import split_into_chunks
from talkadvantage.analysis.models import Transcript
from talkadvantage.llm.client import CompletionClient
from talkadvantage.pipeline_config import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


def first_chunk(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Return the first chunk of *text*, or ``""`` if it has no words."""
    chunks = split_into_chunks(text, chunk_size)
    return chunks[0] if chunks else ""


def build_relation_prompt(excerpts: Sequence[str]) -> str:
    """Enumerate the excerpts and ask what they share and where they differ."""
    listing = "\n".join(f"{i + 1}. {excerpt}" for i, excerpt in enumerate(excerpts))
    return (
        f"Given these transcript chunks:\n{listing}\n\n"
        "What is common between them? What is different? If there is no relation, state that."
    )


async def analyze_relations(
    client: CompletionClient,
    transcripts: Sequence[Transcript],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    temperature: float | None = None,
) -> str:
    """Describe how the transcripts relate, using only each one's first chunk.

    Only the opening chunk is sent to keep the prompt within model limits.
    """
    excerpts = [first_chunk(t.text, chunk_size) for t in transcripts]
    logger.info("Relation analysis over %d transcripts", len(excerpts))
    return await client.complete_text(
        build_relation_prompt(excerpts),
        system=SYSTEM_PROMPT,
        temperature=temperature,
    )
