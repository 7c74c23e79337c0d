"""Data models for hot-link widgets."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class HotLinkWidget:
    """A widget fired when one of its trigger words is spoken."""

    id: str
    name: str
    prompt: str
    model: str
    trigger_words: tuple[str, ...] = field(default_factory=tuple)
