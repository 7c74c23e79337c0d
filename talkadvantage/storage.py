"""Supabase storage helpers for transcript analysis results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from supabase import Client, create_client

from talkadvantage.config import settings

if TYPE_CHECKING:
    from talkadvantage.analysis.models import AnalysisReport

ANALYSES_TABLE = "transcript_analyses"


def storage_configured() -> bool:
    """True when Supabase credentials are present."""
    return bool(settings.supabase_url and settings.supabase_key)


def get_supabase_client() -> Client:
    """Create and return a Supabase client from settings."""
    return create_client(settings.supabase_url, settings.supabase_key)


def store_analysis(client: Client, report: AnalysisReport) -> list[str]:
    """Store one row per transcript result and return the generated IDs."""
    rows: list[dict[str, object]] = [
        {
            "name": r.name,
            "summary": r.summary,
            "sentiment": str(r.sentiment),
            "confidence": r.confidence,
            "chunk_count": r.chunk_count,
            "relation": report.relation,
        }
        for r in report.results
    ]
    if not rows:
        return []
    result = client.table(ANALYSES_TABLE).insert(rows).execute()
    return [str(row["id"]) for row in cast(list[dict[str, Any]], result.data)]


def list_analyses(client: Client) -> list[dict[str, Any]]:
    """Return stored analyses, newest first."""
    result = client.table(ANALYSES_TABLE).select("*").order("created_at", desc=True).execute()
    # Supabase .data is typed as JSON (broad union); cast to concrete type.
    return cast(list[dict[str, Any]], result.data)


def get_analysis(client: Client, analysis_id: str) -> dict[str, Any] | None:
    result = client.table(ANALYSES_TABLE).select("*").eq("id", analysis_id).execute()
    rows = cast(list[dict[str, Any]], result.data)
    return rows[0] if rows else None


def delete_analysis(client: Client, analysis_id: str) -> bool:
    """Delete one stored analysis; returns False if nothing matched."""
    result = client.table(ANALYSES_TABLE).delete().eq("id", analysis_id).execute()
    return bool(result.data)
