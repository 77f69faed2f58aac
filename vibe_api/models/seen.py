"""Watch-history request/response models."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SeenRequest(BaseModel):
    user_id: str = Field(min_length=1)
    media_id: str = Field(min_length=1)
    rating: Optional[float] = Field(default=None, ge=1, le=10)  # optional 1-10


class UnseenRequest(BaseModel):
    user_id: str = Field(min_length=1)
    media_id: str = Field(min_length=1)


class SeenResponse(BaseModel):
    message: str
    media: str  # title
    user_id: str


class SeenListResponse(BaseModel):
    user_id: str
    count: int
    seen: List[Dict[str, Any]]
