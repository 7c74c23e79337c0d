"""Index transcripts into the vector store as overlapping chunk documents."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from talkadvantage.analysis.chunking import (
    RETRIEVAL_CHUNK_SIZE,
    RETRIEVAL_OVERLAP,
    split_with_overlap,
)
from talkadvantage.analysis.models import Transcript
from talkadvantage.retrieval.models import Document, DocumentMetadata
from talkadvantage.retrieval.vector_store import VectorStore

logger = logging.getLogger(__name__)


def chunk_document_id(name: str, index: int) -> str:
    return f"{name}_chunk_{index}"


def transcript_documents(
    transcript: Transcript,
    timestamp: str | None = None,
    chunk_size: int = RETRIEVAL_CHUNK_SIZE,
    overlap: int = RETRIEVAL_OVERLAP,
) -> list[Document]:
    """Split a transcript into documents small enough to embed.

    Every document carries the transcript name so search hits can be grouped
    back per transcript.
    """
    chunks = split_with_overlap(transcript.text, chunk_size, overlap)
    return [
        Document(
            id=chunk_document_id(transcript.name, i),
            content=chunk,
            metadata=DocumentMetadata(
                name=transcript.name,
                timestamp=timestamp,
                chunk_index=i,
                total_chunks=len(chunks),
            ),
        )
        for i, chunk in enumerate(chunks)
    ]


async def add_transcripts(
    store: VectorStore,
    transcripts: Iterable[Transcript],
    timestamp: str | None = None,
) -> int:
    """Chunk and embed every transcript whose name is not indexed yet.

    A name already in the store, or repeated within *transcripts*, is
    skipped: the first write wins.

    Returns:
        Number of transcripts newly indexed.
    """
    seen = store.document_names()
    documents: list[Document] = []
    added = 0
    for transcript in transcripts:
        if transcript.name in seen:
            logger.debug("Transcript %r already indexed, skipping", transcript.name)
            continue
        seen.add(transcript.name)
        documents.extend(transcript_documents(transcript, timestamp))
        added += 1

    await store.add_documents(documents)
    logger.info("Indexed %d transcripts as %d chunks", added, len(documents))
    return added
