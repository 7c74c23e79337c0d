"""Trigger-word detection over a live transcript."""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Iterable

from talkadvantage.hotlinks.models import HotLinkWidget

logger = logging.getLogger(__name__)

# Only the tail of the transcript is inspected
WINDOW_WORDS = 5
DEFAULT_COOLDOWN_SECONDS = 10.0
DEFAULT_SESSION = "default"

_PUNCTUATION_RE = re.compile(r"[.,?!]")


def _normalize(word: str) -> str:
    return _PUNCTUATION_RE.sub("", word).lower()


class HotLinkDetector:
    """Fire at most one widget per cooldown window when a trigger word appears.

    Widgets are shared, but the cooldown is tracked per session: the detector
    remembers when it last fired for each session id so that a word lingering
    at the end of a growing transcript does not fire repeatedly, while other
    sessions are unaffected.
    """

    def __init__(
        self,
        widgets: Iterable[HotLinkWidget] = (),
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._widgets: list[HotLinkWidget] = list(widgets)
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._last_trigger: dict[str, float] = {}

    @property
    def widgets(self) -> list[HotLinkWidget]:
        return list(self._widgets)

    def replace_widgets(self, widgets: Iterable[HotLinkWidget]) -> None:
        self._widgets = list(widgets)

    def reset(self, session_id: str | None = None) -> None:
        """End the cooldown of one session, or of every session when *session_id* is None."""
        if session_id is None:
            self._last_trigger.clear()
        else:
            self._last_trigger.pop(session_id, None)

    def in_cooldown(self, session_id: str = DEFAULT_SESSION, now: float | None = None) -> bool:
        last = self._last_trigger.get(session_id)
        if last is None:
            return False
        now = self._clock() if now is None else now
        return now - last < self.cooldown_seconds

    def check(self, transcript: str, session_id: str = DEFAULT_SESSION) -> HotLinkWidget | None:
        """Return the first widget whose trigger word is among the last five words.

        Widgets are tried in order, and each widget's trigger words in order.
        Comparison ignores case and the punctuation ``.,?!``.
        """
        if not transcript or not self._widgets:
            return None

        now = self._clock()
        if self.in_cooldown(session_id, now):
            logger.debug("Skipping trigger check - within cooldown period")
            return None

        tail = {_normalize(w) for w in transcript.split()[-WINDOW_WORDS:]}

        for widget in self._widgets:
            for trigger in widget.trigger_words:
                if trigger.lower() in tail:
                    logger.info("Widget %r triggered by word %r", widget.name, trigger)
                    self._record_trigger(session_id, now)
                    return widget
        return None

    def _record_trigger(self, session_id: str, now: float) -> None:
        # Expired entries are dropped so the map only holds sessions in cooldown.
        self._last_trigger = {
            sid: t for sid, t in self._last_trigger.items() if now - t < self.cooldown_seconds
        }
        self._last_trigger[session_id] = now
