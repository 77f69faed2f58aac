"""Shared utilities for similarity and ids."""

from .ids import generate_media_id
from .similarity import cosine_similarity

__all__ = [
    "cosine_similarity",
    "generate_media_id",
]
