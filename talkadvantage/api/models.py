"""Pydantic request/response schemas for the TalkAdvantage API.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Transcript analysis ---


class TranscriptIn(ApiModel):
    """A transcript submitted for analysis."""

    name: str = ""
    text: str = ""


class AnalyzeRequest(ApiModel):
    """Request body for /api/analysis/transcripts."""

    transcripts: list[TranscriptIn] = []
    save: bool = False


class TranscriptResult(ApiModel):
    """Combined analysis of one transcript."""

    name: str
    summary: str
    sentiment: str
    confidence: int
    chunk_count: int


class AnalyzeResponse(ApiModel):
    """Response body for /api/analysis/transcripts."""

    results: list[TranscriptResult]
    relation: str
    analysis_ids: list[str] = []


# --- Chat over the vector store ---


class ChatAction(StrEnum):
    """Document management actions accepted by the chat endpoint."""

    ADD = "add"
    REMOVE = "remove"
    DELETE_ALL = "deleteAll"


class ChatTranscript(ApiModel):
    name: str = Field(min_length=1)
    text: str = Field(min_length=1)
    index: int = Field(ge=0)


class ChatRequest(ApiModel):
    """Request body for /api/analysis/chat: a question, an action, or both."""

    question: str | None = None
    transcripts: list[ChatTranscript] | None = None
    action: ChatAction | None = None


class ChatResponse(ApiModel):
    answer: str
    active_transcripts: list[str]
    context: str


class ActionResponse(ApiModel):
    success: bool = True
    document_count: int = 0


# --- Topic drift ---


class TopicDriftRequest(ApiModel):
    previous_thought: str = ""
    current_thought: str = ""
    threshold: float | None = None


class TopicDriftResponse(ApiModel):
    has_drifted: bool


# --- Hot-link widgets ---


class HotLinkWidgetSchema(ApiModel):
    id: str
    name: str
    prompt: str
    model: str
    trigger_words: list[str] = []


class HotLinkDetectRequest(ApiModel):
    transcript: str = ""
    # Cooldowns are tracked per session id
    session_id: str = Field(default="default", min_length=1)


class HotLinkDetectResponse(ApiModel):
    triggered: bool
    widget: HotLinkWidgetSchema | None = None


# --- Stored analyses ---


class StoredAnalysis(ApiModel):
    """A persisted transcript analysis row."""

    id: str
    name: str
    summary: str | None = None
    sentiment: str | None = None
    confidence: int | None = None
    chunk_count: int = 0
    relation: str | None = None
    created_at: str | None = None
