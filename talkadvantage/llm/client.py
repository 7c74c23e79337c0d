"""Chat-completion client used by every analysis step.

The rest of the service treats the model as an opaque text-completion
oracle: a prompt (plus optional system message) goes in, a
:data:`~talkadvantage.llm.models.CompletionResult` comes out.  Two backends
are provided:

- :class:`OpenRouterBackend`: any OpenAI-compatible ``/chat/completions``
  endpoint, OpenRouter by default.
- :class:`AnthropicBackend`: Claude via the Messages API.

:class:`CompletionClient` wraps a backend with an ``asyncio.Semaphore`` so
that the number of in-flight upstream calls never exceeds
``max_concurrent``, however many chunks are fanned out at once.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import anthropic
import openai
from anthropic.types import TextBlock

from talkadvantage.config import Settings
from talkadvantage.llm.models import CompletionResult, Ok, ParseError, UpstreamError, unwrap
from talkadvantage.pipeline_config import LLMProvider

logger = logging.getLogger(__name__)


class CompletionBackend(Protocol):
    """A provider able to answer a single chat-completion request."""

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResult: ...

    async def aclose(self) -> None: ...


class OpenRouterBackend:
    """OpenAI-compatible chat completions (OpenRouter by default)."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        timeout: float = 120.0,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        # SDK retries are disabled: a failed call surfaces to the caller as-is.
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
            default_headers=default_headers,
        )

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResult:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        extra: dict[str, int] = {}
        if max_tokens is not None:
            extra["max_tokens"] = max_tokens

        try:
            response = await self._client.chat.completions.create(
                model=model or self.model,
                messages=messages,  # type: ignore[arg-type]
                temperature=self.temperature if temperature is None else temperature,
                **extra,  # type: ignore[arg-type]
            )
        except openai.APIStatusError as exc:
            return UpstreamError(
                message=f"Completion API error ({exc.status_code}): {exc.message}",
                status_code=exc.status_code,
            )
        except openai.APIError as exc:
            return UpstreamError(message=f"Completion request failed: {exc}")

        # Providers occasionally answer 200 with an error body and no choices.
        if not response.choices:
            return ParseError(message="Completion response contained no choices")
        content = response.choices[0].message.content
        if content is None:
            return ParseError(message="Completion response contained no message content")
        return Ok(content)

    async def aclose(self) -> None:
        await self._client.close()


class AnthropicBackend:
    """Claude via the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.7,
        timeout: float = 120.0,
        max_tokens: int = 1024,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResult:
        kwargs: dict[str, str] = {}
        if system:
            kwargs["system"] = system

        try:
            response = await self._client.messages.create(
                model=model or self.model,
                max_tokens=max_tokens or self.max_tokens,
                temperature=self.temperature if temperature is None else temperature,
                messages=[{"role": "user", "content": prompt}],
                **kwargs,  # type: ignore[arg-type]
            )
        except anthropic.APIStatusError as exc:
            return UpstreamError(
                message=f"Completion API error ({exc.status_code}): {exc.message}",
                status_code=exc.status_code,
            )
        except anthropic.APIError as exc:
            return UpstreamError(message=f"Completion request failed: {exc}")

        # We always request plain text, so the first block should be a TextBlock.
        if not response.content:
            return ParseError(message="Claude response contained no content blocks")
        block = response.content[0]
        if not isinstance(block, TextBlock):
            return ParseError(message=f"Expected TextBlock from Claude, got {type(block).__name__}")
        return Ok(block.text)

    async def aclose(self) -> None:
        await self._client.close()


class CompletionClient:
    """Bounded-concurrency front for a :class:`CompletionBackend`."""

    def __init__(self, backend: CompletionBackend, max_concurrent: int = 8) -> None:
        if max_concurrent < 1:
            msg = f"max_concurrent must be at least 1, got {max_concurrent}"
            raise ValueError(msg)
        self.backend = backend
        self.max_concurrent = max_concurrent
        self._semaphore = asyncio.Semaphore(max_concurrent)

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResult:
        """Run one completion once a concurrency slot is free."""
        async with self._semaphore:
            result = await self.backend.complete(
                prompt,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        if not isinstance(result, Ok):
            logger.warning("Completion call failed: %s", result.message)
        return result

    async def complete_text(
        self,
        prompt: str,
        *,
        system: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Like :meth:`complete` but returns the text or raises ``UpstreamCallError``."""
        result = await self.complete(
            prompt,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return unwrap(result)

    async def aclose(self) -> None:
        await self.backend.aclose()


def build_completion_client(settings: Settings) -> CompletionClient:
    """Construct the configured backend and wrap it in a :class:`CompletionClient`.

    Raises:
        ValueError: If ``settings.llm_provider`` is not recognized.
    """
    provider = LLMProvider(settings.llm_provider)

    backend: CompletionBackend
    if provider is LLMProvider.ANTHROPIC:
        backend = AnthropicBackend(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            temperature=settings.llm_temperature,
            timeout=settings.llm_timeout_seconds,
        )
    else:
        backend = OpenRouterBackend(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            timeout=settings.llm_timeout_seconds,
            default_headers={"HTTP-Referer": settings.app_url, "X-Title": settings.app_title},
        )

    logger.info(
        "Completion client: provider=%s max_concurrent=%d",
        provider.value,
        settings.max_concurrent_requests,
    )
    return CompletionClient(backend, max_concurrent=settings.max_concurrent_requests)
