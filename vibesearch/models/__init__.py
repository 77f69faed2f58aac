"""Data models for the vibe search pipeline."""

from .config import DEFAULT_CONFIG, SearchConfig, resolve_config
from .media import MediaRecord, MediaType, ensure_media, ensure_media_list
from .scoring import (
    HydratedCandidate,
    JudgeStatus,
    Recommendation,
    RerankVerdict,
    SearchCandidate,
    SearchResult,
)

__all__ = [
    "DEFAULT_CONFIG",
    "HydratedCandidate",
    "JudgeStatus",
    "MediaRecord",
    "MediaType",
    "Recommendation",
    "RerankVerdict",
    "SearchCandidate",
    "SearchConfig",
    "SearchResult",
    "ensure_media",
    "ensure_media_list",
    "resolve_config",
]
