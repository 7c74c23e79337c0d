"""Combine chunk analyses into a single per-transcript result."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from talkadvantage.analysis.models import POLARITY, ChunkAnalysis, CombinedAnalysis, Sentiment

logger = logging.getLogger(__name__)

# Fixed decision thresholds on the confidence-weighted mean polarity.
POSITIVE_THRESHOLD = 0.3
NEGATIVE_THRESHOLD = -0.3


def weighted_sentiment(analyses: Sequence[ChunkAnalysis]) -> tuple[float, int]:
    """Return ``(average_sentiment, total_confidence)`` over chunks with a confidence.

    ``average_sentiment`` is ``sum(polarity * confidence) / sum(confidence)``,
    which lies in ``[-1, 1]``; it is ``0.0`` when no chunk carries confidence.
    Labels outside :class:`Sentiment` count with polarity 0.
    """
    weighted = 0
    total_confidence = 0
    for analysis in analyses:
        if analysis.confidence is None:
            continue
        weighted += POLARITY.get(analysis.sentiment, 0) * analysis.confidence
        total_confidence += analysis.confidence

    average = weighted / total_confidence if total_confidence > 0 else 0.0
    return average, total_confidence


def combine_chunk_analyses(analyses: Sequence[ChunkAnalysis]) -> CombinedAnalysis:
    """Merge chunk analyses (in chunk order) into one :class:`CombinedAnalysis`.

    - ``summary``: chunk summaries joined by blank lines.
    - ``sentiment``: Positive above 0.3, Negative below -0.3, else Neutral.
    - ``confidence``: total confidence divided by the number of *all* chunks,
      rounded half-up.  Chunks whose sentiment failed to parse still count in
      the divisor and therefore pull the aggregate confidence down.
    """
    if not analyses:
        return CombinedAnalysis(summary="", sentiment=Sentiment.NEUTRAL, confidence=0)

    summary = "\n\n".join(a.summary for a in analyses)
    average, total_confidence = weighted_sentiment(analyses)

    if average > POSITIVE_THRESHOLD:
        sentiment = Sentiment.POSITIVE
    elif average < NEGATIVE_THRESHOLD:
        sentiment = Sentiment.NEGATIVE
    else:
        sentiment = Sentiment.NEUTRAL

    confidence = math.floor(total_confidence / len(analyses) + 0.5)

    logger.info(
        "Combined %d chunks: sentiment=%s confidence=%d average=%.3f",
        len(analyses),
        sentiment,
        confidence,
        average,
    )
    return CombinedAnalysis(summary=summary, sentiment=sentiment, confidence=confidence)
