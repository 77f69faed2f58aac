"""
Shared fixtures for the search core: in-memory fakes for every external
collaborator (embedder, store, chat model).
"""

import asyncio
from typing import Dict, List, Optional, Set

import pytest

from vibesearch import MediaRecord, SearchConfig


class FakeEmbedder:
    """Returns a fixed vector per text (or `default`); can fail or stall."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, default=None):
        self.vectors = vectors or {}
        self.default = default if default is not None else [1.0, 0.0]
        self.error: Optional[Exception] = None
        self.delay_s = 0.0
        self.calls: List[str] = []

    async def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error:
            raise self.error
        return list(self.vectors.get(text, self.default))

    def model_name(self) -> str:
        return "fake-embed"


class FakeStore:
    """In-memory catalog implementing the pipeline and ingestion store protocols."""

    def __init__(self):
        self.records: Dict[str, MediaRecord] = {}
        self.embeddings: Dict[str, List[float]] = {}
        self.seen: Dict[str, Set[str]] = {}
        self.exclusion_error: Optional[Exception] = None
        self.exclusion_delay_s = 0.0
        self.fetch_errors: Dict[str, Exception] = {}
        self.fetch_delays: Dict[str, float] = {}
        self.boosts: List[tuple] = []

    def add(self, media: MediaRecord, vector: Optional[List[float]] = None) -> MediaRecord:
        self.records[media.id] = media
        if vector is not None:
            self.embeddings[media.id] = list(vector)
        return media

    async def lookup_exclusion_ids_async(self, user_id: str) -> Set[str]:
        if self.exclusion_delay_s:
            await asyncio.sleep(self.exclusion_delay_s)
        if self.exclusion_error:
            raise self.exclusion_error
        return set(self.seen.get(user_id, set()))

    async def fetch_record_async(self, media_id: str) -> Optional[MediaRecord]:
        if media_id in self.fetch_delays:
            await asyncio.sleep(self.fetch_delays[media_id])
        if media_id in self.fetch_errors:
            raise self.fetch_errors[media_id]
        return self.records.get(media_id)

    async def list_media_async(self) -> List[MediaRecord]:
        return list(self.records.values())

    async def find_by_title_async(self, title: str) -> Optional[MediaRecord]:
        for m in self.records.values():
            if m.title.lower() == title.strip().lower():
                return m
        return None

    async def save_media_async(self, media: MediaRecord) -> MediaRecord:
        self.records[media.id] = media
        return media

    async def store_embedding_async(self, media_id: str, vector: List[float], model: str) -> None:
        self.embeddings[media_id] = list(vector)

    async def apply_quality_boost_async(self, media_id: str, amount: float) -> None:
        self.boosts.append((media_id, amount))


class FakeChat:
    """Chat capability returning a canned reply; can raise or stall."""

    def __init__(self, reply: str = ""):
        self.reply = reply
        self.error: Optional[Exception] = None
        self.delay_s = 0.0
        self.prompts: List[tuple] = []

    async def complete(self, system_prompt: str, user_prompt: str, temperature: float = 0.3) -> str:
        self.prompts.append((system_prompt, user_prompt, temperature))
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error:
            raise self.error
        return self.reply


def make_media(media_id: str, vibe: str = "", quality: float = 0.0, popularity: float = 0.0, **kw) -> MediaRecord:
    return MediaRecord(
        id=media_id,
        title=kw.pop("title", media_id.title()),
        media_type=kw.pop("media_type", "movie"),
        vibe_profile=vibe or f"vibe of {media_id}",
        quality_score=quality,
        popularity_score=popularity,
        **kw,
    )


@pytest.fixture
def media_factory():
    return make_media


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def chat():
    return FakeChat()


@pytest.fixture
def fast_config():
    """Short timeouts so timeout paths run quickly."""
    return SearchConfig(
        embed_timeout_s=0.2,
        exclusion_timeout_s=0.2,
        hydration_timeout_s=0.2,
        judge_timeout_s=0.2,
    )
