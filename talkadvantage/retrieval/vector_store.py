"""In-memory vector store with brute-force cosine similarity search.

Documents live in a dict keyed by id; nothing is persisted and nothing is
evicted.  Every search embeds the query and scores it against every stored
document, so this is meant for the handful of transcripts a chat session
works with, not for large corpora.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Sequence

import numpy as np

from talkadvantage.retrieval.embeddings import Embedder
from talkadvantage.retrieval.models import Document, SearchResult

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors; ``0.0`` if either has zero magnitude."""
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb) / denom)


class VectorStore:
    """Id-keyed document map searchable by embedding similarity.

    Adding a document whose id is already present is a no-op: the first
    write wins.
    """

    def __init__(self, embedder: Embedder) -> None:
        self._embedder = embedder
        self._documents: dict[str, Document] = {}

    async def add_document(self, doc: Document) -> None:
        if doc.id in self._documents:
            return
        embedding = await self._embedder.embed_text(doc.content)
        # Re-check: another add for this id may have completed while we awaited.
        if doc.id not in self._documents:
            self._documents[doc.id] = dataclasses.replace(doc, embedding=embedding)

    async def add_documents(self, docs: Iterable[Document]) -> None:
        """Embed and add every document whose id is not stored yet, in one batch."""
        new_docs: dict[str, Document] = {}
        for doc in docs:
            if doc.id not in self._documents and doc.id not in new_docs:
                new_docs[doc.id] = doc
        if not new_docs:
            return

        pending = list(new_docs.values())
        embeddings = await self._embedder.embed_texts([d.content for d in pending])
        for doc, embedding in zip(pending, embeddings, strict=True):
            self._documents.setdefault(doc.id, dataclasses.replace(doc, embedding=embedding))
        logger.info("Added %d documents (%d stored)", len(pending), len(self._documents))

    def remove_document(self, doc_id: str) -> None:
        self._documents.pop(doc_id, None)

    def remove_documents(self, doc_ids: Iterable[str]) -> None:
        for doc_id in doc_ids:
            self._documents.pop(doc_id, None)

    def remove_by_name(self, names: Iterable[str]) -> int:
        """Remove every document whose metadata name is in *names*; returns the count."""
        wanted = set(names)
        doomed = [d.id for d in self._documents.values() if d.metadata.name in wanted]
        for doc_id in doomed:
            del self._documents[doc_id]
        return len(doomed)

    def get_document(self, doc_id: str) -> Document | None:
        return self._documents.get(doc_id)

    async def search(self, query: str, k: int = 3) -> list[SearchResult]:
        """Return up to *k* documents ranked by descending cosine similarity."""
        if k <= 0 or not self._documents:
            return []

        query_embedding = await self._embedder.embed_text(query)
        scored = [
            SearchResult(document=doc, similarity=cosine_similarity(query_embedding, doc.embedding))
            for doc in self._documents.values()
            if doc.embedding is not None
        ]
        scored.sort(key=lambda r: r.similarity, reverse=True)
        return scored[:k]

    def clear(self) -> None:
        self._documents.clear()

    def document_count(self) -> int:
        return len(self._documents)

    def document_ids(self) -> list[str]:
        return list(self._documents)

    def document_names(self) -> set[str]:
        """Names of the transcripts that have at least one stored document."""
        return {d.metadata.name for d in self._documents.values()}
