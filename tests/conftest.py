from __future__ import annotations

from collections.abc import Iterator

import pytest
from fakes import FakeBackend, FakeEmbedder
from fastapi.testclient import TestClient

from talkadvantage.api.deps import get_completion_client, get_hotlink_detector, get_vector_store
from talkadvantage.api.main import app
from talkadvantage.hotlinks.detector import HotLinkDetector
from talkadvantage.llm.client import CompletionClient
from talkadvantage.retrieval.vector_store import VectorStore


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def completion_client(backend: FakeBackend) -> CompletionClient:
    return CompletionClient(backend, max_concurrent=8)


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def vector_store(embedder: FakeEmbedder) -> VectorStore:
    return VectorStore(embedder)


@pytest.fixture
def detector() -> HotLinkDetector:
    return HotLinkDetector(cooldown_seconds=10.0)


@pytest.fixture
def client(
    completion_client: CompletionClient,
    vector_store: VectorStore,
    detector: HotLinkDetector,
) -> Iterator[TestClient]:
    """TestClient with every app-state component replaced by a fake."""
    app.dependency_overrides[get_completion_client] = lambda: completion_client
    app.dependency_overrides[get_vector_store] = lambda: vector_store
    app.dependency_overrides[get_hotlink_detector] = lambda: detector
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
