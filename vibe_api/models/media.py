"""Catalog management models."""

from pydantic import BaseModel, Field

from vibesearch import MediaRecord


class MediaResponse(BaseModel):
    message: str
    media: MediaRecord


class QualityBoostRequest(BaseModel):
    media_id: str = Field(min_length=1)
    amount: float = Field(gt=0)


class StatsResponse(BaseModel):
    media_count: int
    embedding_count: int
    vector_store_size: int
    embedding_model: str
