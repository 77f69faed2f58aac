"""Pydantic request/response models for the API."""

from vibesearch import VibeProfileRequest

from .media import MediaResponse, QualityBoostRequest, StatsResponse
from .search import (
    HiddenGemsResponse,
    RecommendRequest,
    RecommendResponse,
    SimilarResponse,
    VibeResponse,
)
from .seen import SeenListResponse, SeenRequest, SeenResponse, UnseenRequest

__all__ = [
    "HiddenGemsResponse",
    "MediaResponse",
    "QualityBoostRequest",
    "RecommendRequest",
    "RecommendResponse",
    "SeenListResponse",
    "SeenRequest",
    "SeenResponse",
    "SimilarResponse",
    "StatsResponse",
    "UnseenRequest",
    "VibeProfileRequest",
    "VibeResponse",
]
