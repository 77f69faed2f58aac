"""Watch history: mark, list and unmark seen media."""

from fastapi import APIRouter, HTTPException, Query

from ..models import SeenListResponse, SeenRequest, SeenResponse, UnseenRequest
from ..state import get_state
from .errors import core_errors

router = APIRouter()


@router.post("/seen", response_model=SeenResponse)
def mark_seen(request: SeenRequest):
    """Mark media as watched. Unknown users are created on first use."""
    store = get_state().store
    with core_errors("mark seen"):
        store.mark_seen(request.user_id, request.media_id, request.rating)
    media = store.get_media(request.media_id)
    return SeenResponse(message="Marked as seen", media=media.title, user_id=request.user_id)


@router.get("/seen", response_model=SeenListResponse)
def get_seen(user_id: str = Query("", description="User whose history to list")):
    if not user_id:
        raise HTTPException(status_code=400, detail="user_id query parameter required")
    seen = get_state().store.seen_entries(user_id)
    return SeenListResponse(user_id=user_id, count=len(seen), seen=seen)


@router.delete("/seen")
def unmark_seen(request: UnseenRequest):
    removed = get_state().store.unmark_seen(request.user_id, request.media_id)
    return {"message": "Removed from seen list", "removed": removed}
