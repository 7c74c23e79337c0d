"""Dependency providers for the components built at startup."""

from __future__ import annotations

from fastapi import Request

from talkadvantage.hotlinks.detector import HotLinkDetector
from talkadvantage.llm.client import CompletionClient
from talkadvantage.retrieval.vector_store import VectorStore


def get_completion_client(request: Request) -> CompletionClient:
    return request.app.state.completion_client  # type: ignore[no-any-return]


def get_vector_store(request: Request) -> VectorStore:
    return request.app.state.vector_store  # type: ignore[no-any-return]


def get_hotlink_detector(request: Request) -> HotLinkDetector:
    return request.app.state.hotlink_detector  # type: ignore[no-any-return]
