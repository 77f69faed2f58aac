"""
Media model: typed representation of a movie, show, or anime in the catalog.

Used by hydration, judging, hidden-gems ranking and ingestion instead of raw dicts.
Built from store/API dicts via MediaRecord.model_validate(d).
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

MediaType = Literal["movie", "tv", "anime"]


class MediaRecord(BaseModel):
    """
    Media payload used across the pipeline stages.

    Identity (id, media_type) is fixed at creation; vibe_profile and the two
    score signals may be refreshed by ingestion.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    media_type: MediaType
    year: Optional[int] = None
    plot_summary: Optional[str] = ""
    vibe_profile: str = ""
    quality_score: float = 0.0
    popularity_score: float = 0.0
    source_subreddit: Optional[str] = None
    external_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def describe(self) -> str:
        """One-line listing used in judge prompts."""
        year = str(self.year) if self.year else "Unknown"
        return f"[ID: {self.id}] {self.title} ({year}) - Vibe: {self.vibe_profile}"


def ensure_media(record: Union[Dict[str, Any], "MediaRecord"]) -> "MediaRecord":
    """Convert a dict to MediaRecord; pass models through."""
    return MediaRecord.model_validate(record) if isinstance(record, dict) else record


def ensure_media_list(records: List[Union[Dict[str, Any], "MediaRecord"]]) -> List["MediaRecord"]:
    """Convert list of dicts or MediaRecords to list of MediaRecord models."""
    return [ensure_media(r) for r in records]
