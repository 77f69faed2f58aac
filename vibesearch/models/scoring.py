"""
Scoring models: the transient values that flow through one search request.

Contains:
- SearchCandidate: (media_id, similarity) straight out of the vector index
- HydratedCandidate: a candidate resolved to its full MediaRecord
- RerankVerdict: one judged position with its explanation
- Recommendation / SearchResult: what the orchestrator hands back to callers
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from .media import MediaRecord


class SearchCandidate(BaseModel):
    """A similarity hit from the vector index."""

    media_id: str
    similarity: float = Field(ge=-1.0, le=1.0)


class HydratedCandidate(BaseModel):
    """A candidate with its media record; similarity is the retrieval-time score."""

    media: MediaRecord
    similarity: float


class RerankVerdict(BaseModel):
    """A single judged position returned by the reranker."""

    media_id: str
    rank: int = Field(ge=1)
    explanation: str


class Recommendation(BaseModel):
    """
    Externally visible recommendation.

    vibe_score is always the retrieval similarity; judging may reorder and
    explain but never replaces it.
    """

    media: MediaRecord
    vibe_score: float
    explanation: str
    rank: int = Field(ge=1)


class JudgeStatus(str, Enum):
    """How the final ordering of a result list was produced."""

    JUDGED = "judged"
    PARSE_FALLBACK = "parse_fallback"
    DEGRADED = "degraded"
    SKIPPED = "skipped"


class SearchResult(BaseModel):
    """Full result of a vibe search."""

    recommendations: List[Recommendation] = []
    query: str
    total_candidates: int = 0
    filtered_count: int = 0
    judge_status: JudgeStatus = JudgeStatus.SKIPPED
