"""Stats endpoint."""

from fastapi import APIRouter

from ..models import StatsResponse
from ..state import get_state

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
def get_stats():
    """Catalog, embedding and index counts."""
    return StatsResponse(**get_state().stats())
