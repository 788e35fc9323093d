"""
Datasets API

Upload a CSV (file or pasted text), then query the derived profiles, chart
suggestions, correlation matrix, pivot table and chart render payloads.
Each upload replaces the session's dataset; a failed upload leaves the
previous dataset in place.
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel, Field

from ..core.config import settings
from ..models import ChartKind
from ..services.analysis import query_correlation, query_pivot, regenerate_charts
from ..services.chart_data import build_chart_data
from ..services.chart_selector import override_chart_kind
from ..services.csv_ingestion import ingestion_service
from ..services.session_store import DatasetSession, session_store

logger = logging.getLogger("csvinsights.api.datasets")

router = APIRouter(prefix="/datasets", tags=["Datasets"])


# ─── Pydantic models ─────────────────────────────────────────────────

class TextIngestRequest(BaseModel):
    text: str = Field(..., description="CSV text; the first non-empty line is the header")
    session_id: Optional[str] = Field(None, description="Session to replace; a new one is created if omitted")
    name: Optional[str] = Field(None, description="Display name for the pasted data")


class ChartKindUpdate(BaseModel):
    kind: ChartKind


# ─── Helpers ─────────────────────────────────────────────────────────

def _require_session(session_id: str) -> DatasetSession:
    session = session_store.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _upload_size(file: UploadFile) -> int:
    """Size of the spooled upload in bytes, measured when the parser did not record it."""
    if file.size is not None:
        return file.size
    handle = file.file
    position = handle.tell()
    handle.seek(0, os.SEEK_END)
    size = handle.tell()
    handle.seek(position)
    return size


def _summary(session: DatasetSession, include_rows: bool = False) -> Dict[str, Any]:
    return {
        "session_id": session.session_id,
        "source_name": session.analysis.dataset.source_name,
        "updated_at": session.updated_at,
        **session.analysis.to_dict(include_rows=include_rows),
    }


# ─── Endpoints ───────────────────────────────────────────────────────

@router.post("/upload")
async def upload_csv(
    file: UploadFile = File(...),
    session_id: Optional[str] = Form(None),
):
    """Stream-ingest an uploaded CSV file (capped at MAX_ROWS rows) and analyze it."""
    ingestion_service.validate_source_name(file.filename)

    size = _upload_size(file)
    if size > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.MAX_UPLOAD_SIZE_MB} MB upload limit",
        )

    logger.info("Upload: %s (%d bytes) session=%s", file.filename, size, session_id or "new")
    dataset = await ingestion_service.ingest_stream_async(file.file, file.filename)
    session = await asyncio.to_thread(session_store.replace_dataset, session_id, dataset)
    return _summary(session)


@router.post("/text")
async def ingest_text(request: TextIngestRequest):
    """One-shot ingestion of pasted CSV text."""
    dataset = await asyncio.to_thread(
        ingestion_service.ingest_text, request.text, source_name=request.name
    )
    session = await asyncio.to_thread(session_store.replace_dataset, request.session_id, dataset)
    return _summary(session)


@router.get("/{session_id}")
async def get_dataset(
    session_id: str,
    include_rows: bool = Query(False, description="Include every retained row in the response"),
):
    """Columns, row count, profiles and chart specs for the session's dataset."""
    return _summary(_require_session(session_id), include_rows=include_rows)


@router.get("/{session_id}/rows")
async def get_rows(
    session_id: str,
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=10_000),
):
    """Page through retained rows for the preview table."""
    session = _require_session(session_id)
    limit = limit or settings.PREVIEW_CHUNK
    rows = session.analysis.dataset.rows
    page = rows[offset:offset + limit]
    return {
        "session_id": session_id,
        "columns": session.analysis.columns,
        "offset": offset,
        "limit": limit,
        "total": len(rows),
        "rows": [dict(r) for r in page],
    }


@router.get("/{session_id}/correlation")
async def get_correlation(
    session_id: str,
    cols: Optional[str] = Query(None, description="Comma-separated numeric columns. Defaults to all."),
):
    """Pearson correlation matrix over numeric columns (first 10)."""
    session = _require_session(session_id)
    selected: Optional[List[str]] = None
    if cols:
        selected = [c.strip() for c in cols.split(",") if c.strip()]
    matrix = query_correlation(session.analysis, selected)
    return {"session_id": session_id, "cols": list(matrix.keys()), "matrix": matrix}


@router.get("/{session_id}/pivot")
async def get_pivot(
    session_id: str,
    col_a: str = Query(..., description="Categorical column for rows"),
    col_b: str = Query(..., description="Categorical column for columns"),
):
    """Cross-tabulated counts between two categorical columns."""
    session = _require_session(session_id)
    pivot = query_pivot(session.analysis, col_a, col_b)
    return {"session_id": session_id, **pivot.to_dict()}


@router.post("/{session_id}/charts/regenerate")
async def regenerate(session_id: str):
    """Rebuild the auto chart list, discarding any kind overrides."""
    session = _require_session(session_id)
    session = session_store.update_chart_specs(session_id, regenerate_charts(session.analysis))
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"session_id": session_id, "chartSpecs": [c.to_dict() for c in session.analysis.chart_specs]}


@router.patch("/{session_id}/charts/{chart_id}")
async def change_chart_kind(session_id: str, chart_id: str, update: ChartKindUpdate):
    """Override the kind of a single chart; other charts are unchanged."""
    session = _require_session(session_id)
    specs = override_chart_kind(session.analysis.chart_specs, chart_id, update.kind)
    session = session_store.update_chart_specs(session_id, specs)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"session_id": session_id, "chartSpecs": [c.to_dict() for c in session.analysis.chart_specs]}


@router.get("/{session_id}/charts/{chart_id}/data")
async def get_chart_data(session_id: str, chart_id: str):
    """Render payload for one chart."""
    session = _require_session(session_id)
    spec = next((c for c in session.analysis.chart_specs if c.id == chart_id), None)
    if not spec:
        raise HTTPException(status_code=404, detail="Chart not found")
    return build_chart_data(spec, session.analysis)


@router.delete("/{session_id}")
async def reset_session(session_id: str):
    """Discard the session's dataset and everything derived from it."""
    if not session_store.reset(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "reset", "session_id": session_id}
