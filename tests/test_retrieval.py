"""Tests for transcript indexing and retrieval-augmented answers."""

from __future__ import annotations

import asyncio

from fakes import FakeBackend, FakeEmbedder

from talkadvantage.analysis.models import Transcript
from talkadvantage.llm.client import CompletionClient
from talkadvantage.llm.models import Ok
from talkadvantage.retrieval.generation import answer_question, format_context, group_by_transcript
from talkadvantage.retrieval.indexing import add_transcripts, transcript_documents
from talkadvantage.retrieval.models import Document, DocumentMetadata, SearchResult
from talkadvantage.retrieval.vector_store import VectorStore


def _hit(name: str, content: str, similarity: float) -> SearchResult:
    doc = Document(id=f"{name}-{content}", content=content, metadata=DocumentMetadata(name=name))
    return SearchResult(document=doc, similarity=similarity)


def _words(word: str, n: int) -> list[str]:
    return [word] * n


class TestTranscriptDocuments:
    def test_one_document_per_chunk(self) -> None:
        text = " ".join(f"w{i}" for i in range(600))
        docs = transcript_documents(Transcript("standup", text), timestamp="2024-01-01T00:00:00+00:00")

        assert [d.id for d in docs] == ["standup_chunk_0", "standup_chunk_1", "standup_chunk_2"]
        assert all(d.metadata.name == "standup" for d in docs)
        assert [d.metadata.chunk_index for d in docs] == [0, 1, 2]
        assert all(d.metadata.total_chunks == 3 for d in docs)
        assert docs[0].metadata.timestamp == "2024-01-01T00:00:00+00:00"


class TestAddTranscripts:
    def test_long_transcript_embedded_in_small_pieces(
        self, vector_store: VectorStore, embedder: FakeEmbedder
    ) -> None:
        text = " ".join(f"w{i}" for i in range(7000))
        added = asyncio.run(add_transcripts(vector_store, [Transcript("allhands", text)]))

        assert added == 1
        assert len(embedder.batch_calls) == 1
        pieces = embedder.batch_calls[0]
        assert len(pieces) > 1
        assert all(len(p.split()) <= 300 for p in pieces)
        assert vector_store.document_names() == {"allhands"}

    def test_existing_name_is_skipped(
        self, vector_store: VectorStore, embedder: FakeEmbedder
    ) -> None:
        asyncio.run(add_transcripts(vector_store, [Transcript("a", "budget")]))
        added = asyncio.run(add_transcripts(vector_store, [Transcript("a", "weather")]))

        assert added == 0
        assert embedder.batch_calls == [["budget"]]
        stored = vector_store.get_document("a_chunk_0")
        assert stored is not None
        assert stored.content == "budget"

    def test_duplicate_names_in_one_batch_first_wins(self, vector_store: VectorStore) -> None:
        added = asyncio.run(
            add_transcripts(vector_store, [Transcript("a", "budget"), Transcript("a", "weather")])
        )
        assert added == 1
        assert vector_store.document_count() == 1


class TestGrouping:
    def test_groups_by_name_in_best_hit_order(self) -> None:
        hits = [
            _hit("A", "a1", 0.9),
            _hit("B", "b1", 0.8),
            _hit("A", "a2", 0.7),
            _hit("A", "a3", 0.6),
        ]
        groups = group_by_transcript(hits)

        assert list(groups) == ["A", "B"]
        assert [h.document.content for h in groups["A"]] == ["a1", "a2"]
        assert format_context(groups) == "From A:\na1\na2\n\nFrom B:\nb1"

    def test_empty(self) -> None:
        assert group_by_transcript([]) == {}
        assert format_context({}) == ""


class TestAnswerQuestion:
    def test_context_built_from_best_chunks(
        self, vector_store: VectorStore, embedder: FakeEmbedder
    ) -> None:
        finance = " ".join(_words("budget", 250) + _words("weather", 250))
        asyncio.run(
            add_transcripts(
                vector_store,
                [Transcript("finance", finance), Transcript("people", "hiring plan")],
            )
        )
        assert len(embedder.batch_calls[0]) == 4

        backend = FakeBackend(lambda _: Ok("It was approved."))
        answer = asyncio.run(
            answer_question(CompletionClient(backend), vector_store, "budget?", k=2)
        )

        assert answer.answer == "It was approved."
        assert answer.active_transcripts == ["finance"]
        assert answer.context.startswith("From finance:\nbudget budget")
        assert answer.context.count("From ") == 1
        assert backend.calls[0].prompt == "budget?"
        assert backend.calls[0].max_tokens == 2000
