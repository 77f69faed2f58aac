"""Vibe search, find-similar and hidden-gems endpoints."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..models import (
    HiddenGemsResponse,
    RecommendRequest,
    RecommendResponse,
    SimilarResponse,
    VibeResponse,
)
from ..state import get_state
from .errors import core_errors

router = APIRouter()

# Quick GET search: smaller pool, fewer results
VIBE_TOP_K = 15
VIBE_RESULTS = 5


@router.post("/recommend", response_model=RecommendResponse)
async def recommend(request: RecommendRequest):
    """Vibe-based recommendations with seen media removed."""
    state = get_state()
    with core_errors("search"):
        result = await state.orchestrator.search(
            request.user_id,
            request.query,
            top_k=state.search_config.top_k,
            final_results=request.limit,
            use_judge=request.use_judge,
        )
    return RecommendResponse(
        query=result.query,
        total_candidates=result.total_candidates,
        filtered_seen=result.filtered_count,
        judge_status=result.judge_status.value,
        recommendations=result.recommendations,
    )


@router.get("/vibe", response_model=VibeResponse)
async def vibe(
    q: str = Query("", description="Free-text vibe description"),
    user_id: Optional[str] = None,
):
    if not q.strip():
        raise HTTPException(status_code=400, detail="Tell me your vibe! Use ?q=your+vibe+description")
    state = get_state()
    with core_errors("search"):
        result = await state.orchestrator.search(
            user_id, q, top_k=VIBE_TOP_K, final_results=VIBE_RESULTS, use_judge=True
        )
    return VibeResponse(input=q, recommendations=result.recommendations)


@router.get("/similar/{media_id}", response_model=SimilarResponse)
async def similar(media_id: str, user_id: Optional[str] = None, limit: int = 0):
    state = get_state()
    with core_errors("find similar"):
        recs = await state.orchestrator.find_similar(user_id, media_id, limit)
    return SimilarResponse(source_id=media_id, recommendations=recs)


@router.get("/hidden-gems", response_model=HiddenGemsResponse)
async def hidden_gems(user_id: Optional[str] = None, limit: int = 0):
    state = get_state()
    with core_errors("hidden gems"):
        gems = await state.orchestrator.hidden_gems(user_id, limit)
    return HiddenGemsResponse(hidden_gems=gems, user_id=user_id)
