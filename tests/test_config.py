"""Tests for settings, AnalysisConfig and completion-client wiring."""

from __future__ import annotations

import pytest

from talkadvantage.config import Settings
from talkadvantage.llm.client import AnthropicBackend, OpenRouterBackend, build_completion_client
from talkadvantage.pipeline_config import DEFAULT_CHUNK_SIZE, AnalysisConfig, LLMProvider


class TestLLMProvider:
    def test_values(self) -> None:
        assert LLMProvider.OPENROUTER.value == "openrouter"
        assert LLMProvider.ANTHROPIC.value == "anthropic"

    def test_invalid_raises(self) -> None:
        with pytest.raises(ValueError):
            LLMProvider("invalid")

    def test_is_str_subclass(self) -> None:
        assert isinstance(LLMProvider.OPENROUTER, str)


class TestAnalysisConfig:
    def test_defaults(self) -> None:
        cfg = AnalysisConfig()
        assert cfg.chunk_size == DEFAULT_CHUNK_SIZE == 450
        assert cfg.temperature == 0.7

    def test_from_settings(self) -> None:
        cfg = AnalysisConfig.from_settings(
            Settings(_env_file=None, chunk_size=100, llm_temperature=0.2)  # type: ignore[call-arg]
        )
        assert cfg.chunk_size == 100
        assert cfg.temperature == 0.2

    def test_immutable(self) -> None:
        cfg = AnalysisConfig()
        with pytest.raises(AttributeError):
            cfg.chunk_size = 10  # type: ignore[misc]


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.llm_provider == "openrouter"
        assert s.llm_model == "mistralai/mistral-7b-instruct"
        assert s.chunk_size == 450
        assert s.max_concurrent_requests == 8
        assert s.hotlink_cooldown_seconds == 10.0

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_CONCURRENT_REQUESTS", "3")
        monkeypatch.setenv("LLM_PROVIDER", "anthropic")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.max_concurrent_requests == 3
        assert s.llm_provider == "anthropic"


class TestBuildCompletionClient:
    def test_openrouter_default(self) -> None:
        client = build_completion_client(
            Settings(_env_file=None, openrouter_api_key="k", max_concurrent_requests=5)  # type: ignore[call-arg]
        )
        assert isinstance(client.backend, OpenRouterBackend)
        assert client.backend.model == "mistralai/mistral-7b-instruct"
        assert client.max_concurrent == 5

    def test_anthropic(self) -> None:
        client = build_completion_client(
            Settings(_env_file=None, llm_provider="anthropic", anthropic_api_key="k")  # type: ignore[call-arg]
        )
        assert isinstance(client.backend, AnthropicBackend)
        assert client.backend.model == "claude-sonnet-4-20250514"

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError):
            build_completion_client(Settings(_env_file=None, llm_provider="nope"))  # type: ignore[call-arg]
