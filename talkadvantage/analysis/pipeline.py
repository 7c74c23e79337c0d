"""End-to-end analysis pipeline: chunk -> analyze -> combine (-> relate)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from talkadvantage.analysis.aggregation import combine_chunk_analyses
from talkadvantage.analysis.analyzer import analyze_chunk
from talkadvantage.analysis.chunking import chunk_transcript
from talkadvantage.analysis.models import AnalysisReport, Transcript, TranscriptAnalysis
from talkadvantage.analysis.relations import analyze_relations
from talkadvantage.llm.client import CompletionClient
from talkadvantage.pipeline_config import AnalysisConfig

logger = logging.getLogger(__name__)


async def analyze_transcript(
    client: CompletionClient,
    transcript: Transcript,
    config: AnalysisConfig | None = None,
) -> TranscriptAnalysis:
    """Analyze every chunk of one transcript and combine the results.

    All chunks are analyzed concurrently (bounded by the client's semaphore).
    Combination waits for every chunk; the first failure propagates.
    """
    config = config or AnalysisConfig()

    # 1. Chunk
    chunks = chunk_transcript(transcript.text, config.chunk_size)
    logger.info("Transcript %r: %d chunks", transcript.name, len(chunks))

    # 2. Analyze
    analyses = await asyncio.gather(
        *(
            analyze_chunk(client, chunk, len(chunks), temperature=config.temperature)
            for chunk in chunks
        )
    )

    # 3. Combine (gather preserves argument order, so chunk order holds)
    combined = combine_chunk_analyses(analyses)

    return TranscriptAnalysis(
        name=transcript.name,
        summary=combined.summary,
        sentiment=combined.sentiment,
        confidence=combined.confidence,
        chunk_count=len(chunks),
    )


async def analyze_transcripts(
    client: CompletionClient,
    transcripts: Sequence[Transcript],
    config: AnalysisConfig | None = None,
) -> AnalysisReport:
    """Full pipeline over a batch of transcripts.

    Args:
        client: Completion client shared by every call.
        transcripts: Transcripts to analyze (at least one).
        config: Chunk size and temperature.

    Returns:
        Per-transcript results in input order plus the relation narrative.

    Raises:
        ValueError: If *transcripts* is empty.
        UpstreamCallError: If any completion call fails.
    """
    if not transcripts:
        raise ValueError("No transcripts provided")

    config = config or AnalysisConfig()
    logger.info("Processing %d transcripts", len(transcripts))

    results = await asyncio.gather(
        *(analyze_transcript(client, t, config) for t in transcripts)
    )

    relation = await analyze_relations(
        client,
        transcripts,
        chunk_size=config.chunk_size,
        temperature=config.temperature,
    )

    return AnalysisReport(results=list(results), relation=relation)
