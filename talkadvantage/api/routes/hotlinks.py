"""Hot-link widget endpoints: configure widgets and check a live transcript."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from talkadvantage.api.deps import get_hotlink_detector
from talkadvantage.api.models import (
    HotLinkDetectRequest,
    HotLinkDetectResponse,
    HotLinkWidgetSchema,
)
from talkadvantage.hotlinks.detector import HotLinkDetector
from talkadvantage.hotlinks.models import HotLinkWidget

router = APIRouter()


def _to_schema(widget: HotLinkWidget) -> HotLinkWidgetSchema:
    return HotLinkWidgetSchema(
        id=widget.id,
        name=widget.name,
        prompt=widget.prompt,
        model=widget.model,
        trigger_words=list(widget.trigger_words),
    )


@router.get("/api/hotlinks", response_model=list[HotLinkWidgetSchema])
async def list_widgets(
    detector: Annotated[HotLinkDetector, Depends(get_hotlink_detector)],
) -> list[HotLinkWidgetSchema]:
    return [_to_schema(w) for w in detector.widgets]


@router.put("/api/hotlinks", response_model=list[HotLinkWidgetSchema])
async def replace_widgets(
    widgets: list[HotLinkWidgetSchema],
    detector: Annotated[HotLinkDetector, Depends(get_hotlink_detector)],
) -> list[HotLinkWidgetSchema]:
    """Replace the configured widgets. The cooldown is reset."""
    detector.replace_widgets(
        HotLinkWidget(
            id=w.id,
            name=w.name,
            prompt=w.prompt,
            model=w.model,
            trigger_words=tuple(w.trigger_words),
        )
        for w in widgets
    )
    detector.reset()
    return [_to_schema(w) for w in detector.widgets]


@router.post("/api/hotlinks/detect", response_model=HotLinkDetectResponse)
async def detect(
    request: HotLinkDetectRequest,
    detector: Annotated[HotLinkDetector, Depends(get_hotlink_detector)],
) -> HotLinkDetectResponse:
    """Check the tail of a live transcript for trigger words.

    The cooldown after a trigger applies only to the caller's ``sessionId``.
    """
    widget = detector.check(request.transcript, session_id=request.session_id)
    if widget is None:
        return HotLinkDetectResponse(triggered=False)
    return HotLinkDetectResponse(triggered=True, widget=_to_schema(widget))
