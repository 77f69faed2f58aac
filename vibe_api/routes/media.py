"""Catalog management: add, fetch and refresh media; quality boost events."""

from fastapi import APIRouter, HTTPException

from vibesearch import VibeProfileRequest

from ..models import MediaResponse, QualityBoostRequest
from ..state import get_state
from .errors import core_errors

router = APIRouter()


def _require_ingestor():
    ingestor = get_state().ingestor
    if ingestor is None:
        raise HTTPException(
            status_code=503,
            detail="Vibe profile generation not configured. Set OPENAI_API_KEY in .env.",
        )
    return ingestor


@router.post("/media", response_model=MediaResponse, status_code=201)
async def add_media(request: VibeProfileRequest):
    """Generate a vibe profile and embedding for a new title (existing titles are returned as-is)."""
    ingestor = _require_ingestor()
    with core_errors("ingest"):
        media = await ingestor.ingest(request)
    return MediaResponse(message="Media ingested successfully", media=media)


@router.get("/media/{media_id}")
def get_media(media_id: str):
    media = get_state().store.get_media(media_id)
    if media is None:
        raise HTTPException(status_code=404, detail="Media not found")
    return media


@router.post("/media/{media_id}/refresh", response_model=MediaResponse)
async def refresh_media(media_id: str):
    ingestor = _require_ingestor()
    with core_errors("refresh"):
        media = await ingestor.refresh(media_id)
    return MediaResponse(message="Vibe profile refreshed", media=media)


@router.post("/admin/quality-boost", status_code=202)
async def quality_boost(request: QualityBoostRequest):
    """Queue a quality boost; applied in the background."""
    state = get_state()
    if state.store.get_media(request.media_id) is None:
        raise HTTPException(status_code=404, detail="Media not found")
    state.report_quality_boost(request.media_id, request.amount)
    return {"message": "Quality boost queued", "media_id": request.media_id}
