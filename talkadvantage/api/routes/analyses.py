"""Stored analysis endpoints: list, detail, and delete.

The Supabase client is synchronous, so every query runs in a worker thread.
"""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException, Response

from talkadvantage.api.models import StoredAnalysis
from talkadvantage.storage import (
    delete_analysis,
    get_analysis,
    get_supabase_client,
    list_analyses,
    storage_configured,
)

router = APIRouter()


def _require_storage() -> None:
    if not storage_configured():
        raise HTTPException(
            status_code=501,
            detail="Analysis storage is not configured: SUPABASE_URL / SUPABASE_KEY are not set.",
        )


def _to_stored(row: dict[str, Any]) -> StoredAnalysis:
    return StoredAnalysis(
        id=str(row["id"]),
        name=row.get("name", ""),
        summary=row.get("summary"),
        sentiment=row.get("sentiment"),
        confidence=row.get("confidence"),
        chunk_count=row.get("chunk_count") or 0,
        relation=row.get("relation"),
        created_at=row.get("created_at"),
    )


@router.get("/api/analyses", response_model=list[StoredAnalysis])
async def list_stored_analyses() -> list[StoredAnalysis]:
    """List stored analyses ordered by creation date (newest first)."""
    _require_storage()
    rows = await asyncio.to_thread(list_analyses, get_supabase_client())
    return [_to_stored(row) for row in rows]


@router.get("/api/analyses/{analysis_id}", response_model=StoredAnalysis)
async def get_stored_analysis(analysis_id: str) -> StoredAnalysis:
    _require_storage()
    row = await asyncio.to_thread(get_analysis, get_supabase_client(), analysis_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return _to_stored(row)


@router.delete("/api/analyses/{analysis_id}", status_code=204)
async def delete_stored_analysis(analysis_id: str) -> Response:
    _require_storage()
    deleted = await asyncio.to_thread(delete_analysis, get_supabase_client(), analysis_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return Response(status_code=204)
