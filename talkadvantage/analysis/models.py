"""Data models for the transcript analysis pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Sentiment(StrEnum):
    """Sentiment label reported for a chunk or a whole transcript."""

    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


# Polarity used for confidence-weighted aggregation
POLARITY: dict[str, int] = {
    Sentiment.POSITIVE: 1,
    Sentiment.NEUTRAL: 0,
    Sentiment.NEGATIVE: -1,
}


@dataclass(frozen=True)
class Transcript:
    """A named transcript submitted for analysis."""

    name: str
    text: str


@dataclass(frozen=True)
class Chunk:
    """A contiguous word window of a transcript."""

    index: int
    text: str
    word_count: int


@dataclass(frozen=True)
class ChunkAnalysis:
    """Summary and sentiment for a single chunk.

    ``sentiment`` is a :class:`Sentiment` when the model reply parsed, and the
    raw reply otherwise (in which case ``confidence`` is ``None``).
    """

    summary: str
    sentiment: str
    confidence: int | None
    sentiment_raw: str


@dataclass(frozen=True)
class CombinedAnalysis:
    """Aggregate of all chunk analyses of one transcript."""

    summary: str
    sentiment: Sentiment
    confidence: int


@dataclass(frozen=True)
class TranscriptAnalysis:
    """Per-transcript result returned to callers."""

    name: str
    summary: str
    sentiment: Sentiment
    confidence: int
    chunk_count: int


@dataclass
class AnalysisReport:
    """Results for every transcript plus the cross-transcript relation."""

    results: list[TranscriptAnalysis] = field(default_factory=list)
    relation: str = ""
