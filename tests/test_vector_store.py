"""Tests for the in-memory vector store."""

from __future__ import annotations

import asyncio

import pytest
from fakes import FakeEmbedder

from talkadvantage.retrieval.models import Document, DocumentMetadata
from talkadvantage.retrieval.vector_store import VectorStore, cosine_similarity


def _doc(doc_id: str, content: str) -> Document:
    return Document(id=doc_id, content=content, metadata=DocumentMetadata(name=doc_id))


class TestCosineSimilarity:
    def test_identical(self) -> None:
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0]) == pytest.approx(1.0)

    def test_orthogonal(self) -> None:
        assert cosine_similarity([1.0, 0.0], [0.0, 3.0]) == pytest.approx(0.0)

    def test_opposite(self) -> None:
        assert cosine_similarity([1.0, 1.0], [-2.0, -2.0]) == pytest.approx(-1.0)

    def test_scale_invariant(self) -> None:
        assert cosine_similarity([1.0, 2.0, 3.0], [2.0, 4.0, 6.0]) == pytest.approx(1.0)

    def test_zero_vector(self) -> None:
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0


class TestVectorStore:
    def test_add_and_count(self, vector_store: VectorStore) -> None:
        asyncio.run(vector_store.add_document(_doc("a", "budget review")))
        assert vector_store.document_count() == 1
        assert vector_store.document_ids() == ["a"]
        stored = vector_store.get_document("a")
        assert stored is not None
        assert stored.embedding == [1.0, 0.0, 0.0, 0.0]

    def test_duplicate_add_is_noop(self, vector_store: VectorStore, embedder: FakeEmbedder) -> None:
        asyncio.run(vector_store.add_document(_doc("a", "budget")))
        asyncio.run(vector_store.add_document(_doc("a", "weather")))
        assert vector_store.document_count() == 1
        stored = vector_store.get_document("a")
        assert stored is not None
        assert stored.content == "budget"
        assert embedder.single_calls == ["budget"]

    def test_batch_add_skips_existing_and_duplicates(
        self, vector_store: VectorStore, embedder: FakeEmbedder
    ) -> None:
        asyncio.run(vector_store.add_document(_doc("a", "budget")))
        asyncio.run(
            vector_store.add_documents(
                [_doc("a", "x"), _doc("b", "hiring"), _doc("b", "again"), _doc("c", "launch")]
            )
        )
        assert sorted(vector_store.document_ids()) == ["a", "b", "c"]
        assert embedder.batch_calls == [["hiring", "launch"]]
        stored = vector_store.get_document("b")
        assert stored is not None
        assert stored.content == "hiring"

    def test_batch_add_all_existing_makes_no_call(
        self, vector_store: VectorStore, embedder: FakeEmbedder
    ) -> None:
        asyncio.run(vector_store.add_document(_doc("a", "budget")))
        asyncio.run(vector_store.add_documents([_doc("a", "budget")]))
        assert embedder.batch_calls == []

    def test_remove(self, vector_store: VectorStore) -> None:
        asyncio.run(vector_store.add_documents([_doc("a", "x"), _doc("b", "y"), _doc("c", "z")]))
        vector_store.remove_document("a")
        vector_store.remove_document("missing")
        assert sorted(vector_store.document_ids()) == ["b", "c"]
        vector_store.remove_documents(["b", "c", "nope"])
        assert vector_store.document_count() == 0

    def test_remove_then_add_again(self, vector_store: VectorStore) -> None:
        asyncio.run(vector_store.add_document(_doc("a", "budget")))
        vector_store.remove_document("a")
        asyncio.run(vector_store.add_document(_doc("a", "weather")))
        stored = vector_store.get_document("a")
        assert stored is not None
        assert stored.content == "weather"

    def test_clear(self, vector_store: VectorStore) -> None:
        asyncio.run(vector_store.add_documents([_doc("a", "x"), _doc("b", "y")]))
        vector_store.clear()
        assert vector_store.document_count() == 0
        assert vector_store.document_ids() == []

    def test_search_ranks_by_similarity(self, vector_store: VectorStore) -> None:
        asyncio.run(
            vector_store.add_documents(
                [
                    _doc("budget", "budget budget review"),
                    _doc("hiring", "hiring plan"),
                    _doc("mixed", "budget for hiring"),
                    _doc("weather", "weather chat"),
                ]
            )
        )
        results = asyncio.run(vector_store.search("what about the budget?", k=3))

        assert len(results) == 3
        assert results[0].document.id == "budget"
        assert results[1].document.id == "mixed"
        similarities = [r.similarity for r in results]
        assert similarities == sorted(similarities, reverse=True)
        assert results[0].similarity == pytest.approx(1.0)

    def test_search_default_k_is_three(self, vector_store: VectorStore) -> None:
        asyncio.run(vector_store.add_documents([_doc(str(i), "budget") for i in range(5)]))
        assert len(asyncio.run(vector_store.search("budget"))) == 3

    def test_search_fewer_docs_than_k(self, vector_store: VectorStore) -> None:
        asyncio.run(vector_store.add_document(_doc("a", "budget")))
        assert len(asyncio.run(vector_store.search("budget", k=10))) == 1

    def test_search_empty_store_skips_embedding(
        self, vector_store: VectorStore, embedder: FakeEmbedder
    ) -> None:
        assert asyncio.run(vector_store.search("anything")) == []
        assert embedder.single_calls == []

    def test_search_non_positive_k(self, vector_store: VectorStore) -> None:
        asyncio.run(vector_store.add_document(_doc("a", "budget")))
        assert asyncio.run(vector_store.search("budget", k=0)) == []

    def test_remove_by_name_drops_every_chunk(self, vector_store: VectorStore) -> None:
        docs = [
            Document(id=f"finance_chunk_{i}", content="budget", metadata=DocumentMetadata(name="finance"))
            for i in range(3)
        ]
        docs.append(_doc("people", "hiring"))
        asyncio.run(vector_store.add_documents(docs))
        assert vector_store.document_names() == {"finance", "people"}

        assert vector_store.remove_by_name(["finance", "missing"]) == 3
        assert vector_store.document_ids() == ["people"]
        assert vector_store.document_names() == {"people"}
