"""Application state: store, index, embedder, judge and the search pipeline."""

import asyncio
import logging
from typing import Optional

from vibesearch import (
    MediaIngestor,
    QualityBoostQueue,
    SearchConfig,
    SearchOrchestrator,
    VectorIndex,
    VibeJudge,
)

from .config import ServerConfig, get_config
from .services import (
    JsonCatalogStore,
    LiteLLMChat,
    OpenAIEmbedder,
    PlaceholderEmbedder,
    VibeProfileWriter,
)

logger = logging.getLogger(__name__)


class AppState:
    """Global application state."""

    def __init__(
        self,
        config: ServerConfig,
        search_config: Optional[SearchConfig] = None,
        embedder=None,
        chat=None,
    ):
        self.config = config
        self.search_config = search_config or config.load_search_config()

        self.store = JsonCatalogStore(config.data_path, self.search_config.max_quality_boost)
        logger.info("[startup] Catalog store: %s", config.data_path)

        if embedder is not None:
            self.embedder = embedder
        elif config.openai_api_key:
            self.embedder = OpenAIEmbedder(
                api_key=config.openai_api_key,
                model=config.embedding_model,
                dimensions=config.embedding_dimensions,
                timeout=self.search_config.embed_timeout_s,
            )
        else:
            logger.warning("[startup] OPENAI_API_KEY not set, using placeholder embeddings")
            self.embedder = PlaceholderEmbedder(config.embedding_dimensions)
        logger.info("[startup] Embedding model: %s", self.embedder.model_name())

        if chat is None and config.openai_api_key:
            chat = LiteLLMChat(
                model=config.judge_model,
                api_key=config.openai_api_key,
                timeout=self.search_config.judge_timeout_s,
            )
        self.chat = chat

        self.judge: Optional[VibeJudge] = None
        if chat is not None and config.enable_judge:
            self.judge = VibeJudge(
                chat,
                max_verdicts=self.search_config.max_verdicts,
                temperature=self.search_config.judge_temperature,
                timeout_s=self.search_config.judge_timeout_s,
            )
        logger.info("[startup] Judge: %s", config.judge_model if self.judge else "disabled")

        self.profile_writer = VibeProfileWriter(chat) if chat is not None else None

        self.index = VectorIndex()
        self.orchestrator = SearchOrchestrator(
            self.index, self.embedder, self.store, judge=self.judge, config=self.search_config
        )
        self.ingestor: Optional[MediaIngestor] = None
        if self.profile_writer is not None:
            self.ingestor = MediaIngestor(
                self.store, self.embedder, self.profile_writer, self.index, self.search_config
            )

        self.boosts: Optional[QualityBoostQueue] = None
        self._boost_task: Optional[asyncio.Task] = None

    def load_index(self) -> int:
        """Load stored vectors produced by the current embedding model into the index."""
        vectors = self.store.all_embeddings(model=self.embedder.model_name())
        skipped = self.store.embedding_count() - len(vectors)
        if skipped:
            logger.warning(
                "[startup] Skipped %d embeddings from other models (current: %s)",
                skipped, self.embedder.model_name(),
            )
        self.index.load(vectors)
        return len(vectors)

    async def start_background(self) -> None:
        """Start draining quality boosts (must run inside the serving loop)."""
        self.boosts = QualityBoostQueue(self.store, self.search_config.max_quality_boost)
        self._boost_task = asyncio.create_task(self.boosts.run())

    async def stop_background(self) -> None:
        if self._boost_task is None:
            return
        self._boost_task.cancel()
        try:
            await self._boost_task
        except asyncio.CancelledError:
            pass
        self._boost_task = None

    def report_quality_boost(self, media_id: str, amount: float) -> None:
        """One-way quality signal; ignored until the background drain is running."""
        if self.boosts is None:
            logger.warning("[boost] DROPPED media_id=%s queue not running", media_id)
            return
        self.boosts.report(media_id, amount)

    def stats(self) -> dict:
        return {
            "media_count": self.store.media_count(),
            "embedding_count": self.store.embedding_count(),
            "vector_store_size": self.index.size(),
            "embedding_model": self.embedder.model_name(),
        }


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        _state = AppState(get_config())
    return _state


def set_state(state: Optional[AppState]) -> None:
    """Replace the global state (tests build one per temp catalog)."""
    global _state
    _state = state
