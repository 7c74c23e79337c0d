"""Topic drift detection between two consecutive conversation segments."""

from __future__ import annotations

import json
import logging
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from talkadvantage.llm.client import CompletionClient
from talkadvantage.llm.models import ParseError, UpstreamCallError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI assistant specialized in analyzing conversation flow and topic "
    "coherence. You provide precise assessments of topic drift in conversations."
)

_PROMPT_TEMPLATE = """\
Compare these two conversation segments and determine if there has been a significant topic drift.

Previous thought: "{previous}"
Current thought: "{current}"
Drift threshold: {threshold} (0-1 scale, higher means more sensitive)

Analyze:
1. Semantic similarity
2. Contextual continuity
3. Topic coherence
4. Natural conversation flow

Return ONLY a JSON object with a single boolean property "hasDrifted" indicating if the drift exceeds the threshold.
Example: {{"hasDrifted": true}}"""

# Models sometimes wrap JSON in a ```json fence despite being asked not to
_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class DriftVerdict(BaseModel):
    """Schema of the model's reply."""

    model_config = ConfigDict(populate_by_name=True)

    has_drifted: bool | None = Field(default=None, alias="hasDrifted")


def parse_drift_reply(raw: str) -> bool:
    """Parse ``{"hasDrifted": ...}`` out of a model reply.

    A missing or null ``hasDrifted``, and a reply that is valid JSON but not an
    object, count as no drift.

    Raises:
        UpstreamCallError: Wrapping a :class:`ParseError` if the reply is not
            JSON, or ``hasDrifted`` cannot be read as a boolean.
    """
    text = raw.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        payload = json.loads(text or "{}")
    except json.JSONDecodeError as exc:
        raise UpstreamCallError(
            ParseError(message=f"Unparseable topic drift reply: {exc.msg}", raw=raw)
        ) from exc
    if not isinstance(payload, dict):
        return False

    try:
        verdict = DriftVerdict.model_validate(payload)
    except ValidationError as exc:
        raise UpstreamCallError(
            ParseError(
                message=f"Unparseable topic drift reply: {exc.errors()[0]['msg']}", raw=raw
            )
        ) from exc
    return bool(verdict.has_drifted)


async def detect_topic_drift(
    client: CompletionClient,
    previous_thought: str,
    current_thought: str,
    threshold: float,
    model: str | None = None,
) -> bool:
    """Ask the model whether the conversation drifted past *threshold*."""
    prompt = _PROMPT_TEMPLATE.format(
        previous=previous_thought, current=current_thought, threshold=threshold
    )
    raw = await client.complete_text(
        prompt,
        system=SYSTEM_PROMPT,
        model=model,
        temperature=0.3,
        max_tokens=100,
    )
    drifted = parse_drift_reply(raw)
    logger.info("Topic drift check (threshold=%.2f): %s", threshold, drifted)
    return drifted
