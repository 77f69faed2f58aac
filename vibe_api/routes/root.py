"""Root and health endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter

from ..services import check_openai_available
from ..state import get_state

router = APIRouter()


@router.get("/")
def root():
    state = get_state()
    return {
        "name": "Vibe Search API",
        "version": "1.0.0",
        "index_size": state.index.size(),
        "embedding_model": state.embedder.model_name(),
        "judge": state.config.judge_model if state.judge else None,
        "endpoints": {
            "seen": ["/api/seen"],
            "recommendations": ["/api/recommend", "/api/vibe", "/api/similar/{media_id}", "/api/hidden-gems"],
            "media": ["/api/media", "/api/media/{media_id}", "/api/media/{media_id}/refresh"],
            "admin": ["/api/admin/quality-boost", "/api/stats"],
        },
    }


@router.get("/api/health")
def health():
    state = get_state()
    openai_ok, openai_msg = check_openai_available(state.config.openai_api_key)
    return {
        "status": "healthy",
        "time": datetime.now(timezone.utc).isoformat(),
        "openai": {"available": openai_ok, "message": openai_msg},
        "judge_enabled": state.judge is not None,
    }
