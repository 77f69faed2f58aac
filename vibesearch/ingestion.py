"""
Ingestion: adding media to the catalog and keeping vectors in sync.

MediaIngestor writes the record, its vibe profile and its embedding to the
store, then upserts the vector into the live index. QualityBoostQueue carries
one-way "quality boost for id X" events from discovery jobs to the store,
off the request path.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Protocol

from pydantic import BaseModel, Field

from .errors import IngestionFailed, MediaNotFound
from .index import VectorIndex
from .models.config import SearchConfig, resolve_config
from .models.media import MediaRecord, MediaType
from .utils.ids import generate_media_id

logger = logging.getLogger(__name__)


class VibeProfileRequest(BaseModel):
    title: str = Field(min_length=1)
    media_type: MediaType
    year: Optional[int] = None
    synopsis: str = ""


class ProfileWriter(Protocol):
    """Writes the free-text vibe profile for a title (an LLM in production)."""

    async def write_profile(self, title: str, media_type: str, year: Optional[int], synopsis: str) -> str:
        ...


class VectorEmbedder(Protocol):
    async def embed(self, text: str) -> List[float]:
        ...

    def model_name(self) -> str:
        ...


class MediaWriter(Protocol):
    async def fetch_record_async(self, media_id: str) -> Optional[MediaRecord]:
        ...

    async def find_by_title_async(self, title: str) -> Optional[MediaRecord]:
        ...

    async def save_media_async(self, media: MediaRecord) -> MediaRecord:
        ...

    async def store_embedding_async(self, media_id: str, vector: List[float], model: str) -> None:
        ...

    async def apply_quality_boost_async(self, media_id: str, amount: float) -> None:
        ...


class MediaIngestor:
    def __init__(
        self,
        store: MediaWriter,
        embedder: VectorEmbedder,
        writer: ProfileWriter,
        index: VectorIndex,
        config: Optional[SearchConfig] = None,
    ):
        self.store = store
        self.embedder = embedder
        self.writer = writer
        self.index = index
        self.config = resolve_config(config)

    async def _profile(self, title: str, media_type: str, year: Optional[int], synopsis: str) -> str:
        try:
            profile = await self.writer.write_profile(title, media_type, year, synopsis)
        except Exception as e:
            raise IngestionFailed(f"failed to generate vibe profile: {e}") from e
        profile = (profile or "").strip()
        if not profile:
            raise IngestionFailed(f"empty vibe profile for {title!r}")
        return profile

    async def _embed_and_index(self, media: MediaRecord) -> None:
        try:
            vector = await asyncio.wait_for(
                self.embedder.embed(media.vibe_profile), self.config.embed_timeout_s
            )
        except asyncio.TimeoutError as e:
            raise IngestionFailed(f"embedding timed out for {media.id}") from e
        except Exception as e:
            raise IngestionFailed(f"failed to generate embedding: {e}") from e
        await self.store.store_embedding_async(media.id, list(vector), self.embedder.model_name())
        self.index.upsert(media.id, vector)

    async def ingest(self, request: VibeProfileRequest) -> MediaRecord:
        """
        Add a title to the catalog.

        If a record with the same title exists (case-insensitive) it is
        returned unchanged. Otherwise the record is persisted first, then its
        embedding; an embedding failure leaves a record without a vector that
        refresh() can repair.
        """
        existing = await self.store.find_by_title_async(request.title)
        if existing is not None:
            logger.info("[ingest] EXISTS media_id=%s", existing.id)
            return existing

        profile = await self._profile(request.title, request.media_type, request.year, request.synopsis)
        now = datetime.now(timezone.utc)
        media = MediaRecord(
            id=generate_media_id(request.title, request.media_type),
            title=request.title,
            media_type=request.media_type,
            year=request.year,
            plot_summary=request.synopsis,
            vibe_profile=profile,
            created_at=now,
            updated_at=now,
        )
        media = await self.store.save_media_async(media)
        await self._embed_and_index(media)
        logger.info("[ingest] ADDED media_id=%s index_size=%d", media.id, self.index.size())
        return media

    async def refresh(self, media_id: str) -> MediaRecord:
        """Regenerate profile and embedding for an existing record."""
        media = await self.store.fetch_record_async(media_id)
        if media is None:
            raise MediaNotFound(media_id)

        profile = await self._profile(media.title, media.media_type, media.year, media.plot_summary or "")
        media = media.model_copy(
            update={"vibe_profile": profile, "updated_at": datetime.now(timezone.utc)}
        )
        media = await self.store.save_media_async(media)
        await self._embed_and_index(media)
        logger.info("[ingest] REFRESHED media_id=%s", media_id)
        return media


# ============================================================================
# Quality boosts
# ============================================================================

@dataclass(frozen=True)
class QualityBoost:
    media_id: str
    amount: float


class QualityBoostQueue:
    """
    Fire-and-forget quality boost events.

    report() never blocks or fails the caller and may be called from any
    thread (sync FastAPI routes run in a worker pool). Once the queue is bound
    to a loop (created inside one, or by run()), reports from other threads are handed over with
    call_soon_threadsafe. run() applies events to the store one at a time
    until cancelled.
    """

    def __init__(self, store: MediaWriter, max_boost: float = 2.0):
        self.store = store
        self.max_boost = max_boost
        self._queue: "asyncio.Queue[QualityBoost]" = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = _current_loop()

    def report(self, media_id: str, amount: float) -> None:
        if amount <= 0:
            logger.info("[boost] IGNORED media_id=%s amount=%s", media_id, amount)
            return
        boost = QualityBoost(media_id, min(amount, self.max_boost))
        loop = self._loop
        if loop is not None and _current_loop() is not loop:
            loop.call_soon_threadsafe(self._queue.put_nowait, boost)
        else:
            self._queue.put_nowait(boost)

    def pending(self) -> int:
        return self._queue.qsize()

    async def join(self) -> None:
        """Wait until every reported boost has been applied."""
        await self._queue.join()

    async def _apply(self, boost: QualityBoost) -> None:
        try:
            await self.store.apply_quality_boost_async(boost.media_id, boost.amount)
            logger.info("[boost] APPLIED media_id=%s amount=%.2f", boost.media_id, boost.amount)
        except Exception:
            logger.exception("[boost] FAILED media_id=%s", boost.media_id)

    async def drain(self) -> int:
        """Apply everything queued right now; returns the number applied."""
        count = 0
        while not self._queue.empty():
            await self._apply(self._queue.get_nowait())
            self._queue.task_done()
            count += 1
        return count

    async def run(self) -> None:
        self._loop = asyncio.get_running_loop()
        while True:
            boost = await self._queue.get()
            try:
                await self._apply(boost)
            finally:
                self._queue.task_done()


def _current_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
