"""Per-chunk summary and sentiment analysis."""

from __future__ import annotations

import asyncio
import logging
import re

from talkadvantage.analysis.models import Chunk, ChunkAnalysis, Sentiment
from talkadvantage.llm.client import CompletionClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI assistant specialized in transcripts analysis and their relationship."
)

SUMMARY_PROMPT = "Summarize the following transcript chunk ({position}/{total}):\n\n{chunk}"

SENTIMENT_PROMPT = (
    "Analyze the sentiment of the following transcript chunk ({position}/{total}). "
    "Respond with only one word (Positive, Negative, or Neutral) and a percentage "
    "score (0-100) for confidence. Example: Positive (87%)\n\n{chunk}"
)

_SENTIMENT_RE = re.compile(r"(Positive|Negative|Neutral)\s*\(?(\d{1,3})%?\)?", re.IGNORECASE)


def parse_sentiment(raw: str) -> tuple[str, int | None]:
    """Extract a sentiment label and confidence from a model reply.

    ``"Positive (87%)"``, ``"negative 40"`` and ``"The sentiment is Neutral (55%)."``
    all parse. The label is normalised to a :class:`Sentiment` member and the
    confidence is clamped to ``[0, 100]``.

    Returns:
        ``(label, confidence)``, or ``(raw, None)`` when the reply does not match.
    """
    match = _SENTIMENT_RE.search(raw)
    if not match:
        return raw, None
    label = Sentiment(match.group(1).capitalize())
    confidence = min(100, max(0, int(match.group(2))))
    return label, confidence


async def analyze_chunk(
    client: CompletionClient,
    chunk: Chunk,
    total: int,
    temperature: float | None = None,
) -> ChunkAnalysis:
    """Summarize one chunk and classify its sentiment.

    The summary and sentiment requests are sent concurrently and both must
    succeed; an upstream failure raises ``UpstreamCallError`` without retry.

    Args:
        client: Completion client.
        chunk: The chunk to analyze; its ``index`` gives the prompt position.
        total: Number of chunks in the transcript.
        temperature: Sampling temperature override.
    """
    position = chunk.index + 1
    logger.debug("Analyzing chunk %d/%d", position, total)

    summary, sentiment_raw = await asyncio.gather(
        client.complete_text(
            SUMMARY_PROMPT.format(position=position, total=total, chunk=chunk.text),
            system=SYSTEM_PROMPT,
            temperature=temperature,
        ),
        client.complete_text(
            SENTIMENT_PROMPT.format(position=position, total=total, chunk=chunk.text),
            system=SYSTEM_PROMPT,
            temperature=temperature,
        ),
    )

    sentiment, confidence = parse_sentiment(sentiment_raw)
    if confidence is None:
        logger.info("Chunk %d/%d: unparseable sentiment reply %r", position, total, sentiment_raw)
    else:
        logger.debug("Chunk %d/%d: %s (%d%%)", position, total, sentiment, confidence)

    return ChunkAnalysis(
        summary=summary,
        sentiment=sentiment,
        confidence=confidence,
        sentiment_raw=sentiment_raw,
    )
