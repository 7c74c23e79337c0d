"""Pipeline configuration: completion provider enum and AnalysisConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from talkadvantage.config import Settings


class LLMProvider(str, Enum):
    """Available chat-completion backends."""

    OPENROUTER = "openrouter"
    ANTHROPIC = "anthropic"


DEFAULT_CHUNK_SIZE = 450


@dataclass(frozen=True)
class AnalysisConfig:
    """Immutable configuration for the transcript analysis pipeline.

    Holds the chunk window size and the sampling temperature used for the
    per-chunk and relation prompts.  Defaults mirror the service defaults.
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    temperature: float = 0.7

    @classmethod
    def from_settings(cls, settings: Settings) -> AnalysisConfig:
        return cls(chunk_size=settings.chunk_size, temperature=settings.llm_temperature)
