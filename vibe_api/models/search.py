"""Recommendation request/response models."""

from typing import List, Optional

from pydantic import BaseModel, Field

from vibesearch import MediaRecord, Recommendation


class RecommendRequest(BaseModel):
    user_id: str = Field(min_length=1)
    query: str = Field(min_length=1)  # natural language vibe description
    limit: int = 0  # <= 0 uses the configured default
    use_judge: bool = True


class RecommendResponse(BaseModel):
    query: str
    total_candidates: int
    filtered_seen: int
    judge_status: str
    recommendations: List[Recommendation]


class VibeResponse(BaseModel):
    input: str
    recommendations: List[Recommendation]


class SimilarResponse(BaseModel):
    source_id: str
    recommendations: List[Recommendation]


class HiddenGemsResponse(BaseModel):
    hidden_gems: List[MediaRecord]
    user_id: Optional[str] = None
