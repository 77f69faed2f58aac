"""
Vibe search core.

Single entry point for the algorithm package:
- models/: MediaRecord, SearchConfig, search/scoring values
- index: in-memory VectorIndex (exhaustive cosine scan with exclusion)
- stages/: retrieval, hydration, judge, assembly, hidden gems, orchestrator
- ingestion: MediaIngestor and the quality boost queue
"""

from .errors import (
    EmbeddingFailed,
    ExclusionLookupFailed,
    IngestionFailed,
    JudgeDegraded,
    MediaNotFound,
    RetrievalFailed,
)
from .index import VectorIndex
from .ingestion import MediaIngestor, QualityBoostQueue, VibeProfileRequest
from .models import (
    DEFAULT_CONFIG,
    JudgeStatus,
    MediaRecord,
    Recommendation,
    SearchConfig,
    SearchResult,
)
from .stages import SearchOrchestrator, VibeJudge
from .utils import cosine_similarity, generate_media_id

__all__ = [
    "DEFAULT_CONFIG",
    "EmbeddingFailed",
    "ExclusionLookupFailed",
    "IngestionFailed",
    "JudgeDegraded",
    "JudgeStatus",
    "MediaIngestor",
    "MediaNotFound",
    "MediaRecord",
    "QualityBoostQueue",
    "Recommendation",
    "RetrievalFailed",
    "SearchConfig",
    "SearchOrchestrator",
    "SearchResult",
    "VectorIndex",
    "VibeJudge",
    "VibeProfileRequest",
    "cosine_similarity",
    "generate_media_id",
]
