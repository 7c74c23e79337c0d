"""Data models for the in-memory document store."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DocumentMetadata:
    """Descriptive fields kept alongside a stored document."""

    name: str
    timestamp: str | None = None
    chunk_index: int = 0
    total_chunks: int = 1


@dataclass(frozen=True)
class Document:
    """A document, with its embedding once it has been stored."""

    id: str
    content: str
    metadata: DocumentMetadata
    embedding: list[float] | None = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class SearchResult:
    """A stored document and its cosine similarity to the query."""

    document: Document
    similarity: float
