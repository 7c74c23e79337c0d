"""Embedding helpers using OpenAI text-embedding-3-small."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    """Anything that turns texts into embedding vectors."""

    async def embed_text(self, text: str) -> list[float]: ...

    async def embed_texts(self, texts: Sequence[str]) -> list[list[float]]: ...


class OpenAIEmbedder:
    """Embed texts with the OpenAI embeddings API."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        timeout: float = 120.0,
    ) -> None:
        self.model = model
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    async def embed_text(self, text: str) -> list[float]:
        """Embed a single string."""
        response = await self._client.embeddings.create(input=[text], model=self.model)
        return response.data[0].embedding

    async def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed a batch of strings in one request.

        Returns:
            A list of embedding vectors (one per input text, same order).
        """
        if not texts:
            return []
        response = await self._client.embeddings.create(input=list(texts), model=self.model)
        logger.debug("Embedded %d texts with %s", len(texts), self.model)
        # The API returns items tagged with their input index.
        return [item.embedding for item in sorted(response.data, key=lambda d: d.index)]

    async def aclose(self) -> None:
        await self._client.close()
