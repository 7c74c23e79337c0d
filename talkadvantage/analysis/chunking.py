"""Fixed-size word chunking for transcript analysis."""

from __future__ import annotations

import logging

from talkadvantage.analysis.models import Chunk
from talkadvantage.pipeline_config import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)


def split_into_chunks(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Split *text* into windows of exactly *chunk_size* words.

    Words are runs of non-whitespace; each window is re-joined with single
    spaces. The last window may be shorter. There is no sentence awareness,
    so a window boundary can fall mid-sentence.

    Args:
        text: Raw transcript text.
        chunk_size: Number of words per chunk.

    Returns:
        Chunk strings in transcript order. Empty if *text* has no words.

    Raises:
        ValueError: If *chunk_size* is smaller than 1.
    """
    if chunk_size < 1:
        msg = f"chunk_size must be a positive integer, got {chunk_size}"
        raise ValueError(msg)

    words = text.split()
    chunks = [" ".join(words[i : i + chunk_size]) for i in range(0, len(words), chunk_size)]

    logger.debug(
        "Split %d words into %d chunks of size %d", len(words), len(chunks), chunk_size
    )
    return chunks


def chunk_transcript(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[Chunk]:
    """Like :func:`split_into_chunks` but returns indexed :class:`Chunk` objects."""
    return [
        Chunk(index=i, text=chunk, word_count=len(chunk.split()))
        for i, chunk in enumerate(split_into_chunks(text, chunk_size))
    ]


# Retrieval chunks are smaller and overlap so that a passage cut at a window
# boundary is still whole in one of the two neighbouring chunks.
RETRIEVAL_CHUNK_SIZE = 250
RETRIEVAL_OVERLAP = 50
SENTENCE_LOOKAHEAD = 50

_SENTENCE_END = (".", "!", "?")


def split_with_overlap(
    text: str,
    chunk_size: int = RETRIEVAL_CHUNK_SIZE,
    overlap: int = RETRIEVAL_OVERLAP,
) -> list[str]:
    """Split *text* into overlapping word windows that end on a sentence where possible.

    Each window takes *chunk_size* words and is then extended up to the next
    word ending in ``.``, ``!`` or ``?`` if one occurs within
    ``SENTENCE_LOOKAHEAD`` words. The next window starts *overlap* words
    before the previous one ended.

    Raises:
        ValueError: If *chunk_size* is smaller than 1 or *overlap* is not in
            ``[0, chunk_size)``.
    """
    if chunk_size < 1:
        msg = f"chunk_size must be a positive integer, got {chunk_size}"
        raise ValueError(msg)
    if not 0 <= overlap < chunk_size:
        msg = f"overlap must be in [0, {chunk_size}), got {overlap}"
        raise ValueError(msg)

    words = text.split()
    chunks: list[str] = []
    start = 0

    while start < len(words):
        end = min(start + chunk_size, len(words))
        if not words[end - 1].endswith(_SENTENCE_END):
            for j in range(end, min(end + SENTENCE_LOOKAHEAD, len(words))):
                if words[j].endswith(_SENTENCE_END):
                    end = j + 1
                    break

        chunks.append(" ".join(words[start:end]))
        if end == len(words):
            break
        start = end - overlap

    logger.debug("Split %d words into %d overlapping chunks", len(words), len(chunks))
    return chunks
