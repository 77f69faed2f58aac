"""
Pipeline orchestrator: the only entry point request handlers use.

search():        embed -> exclusion set -> Stage A (retrieval) -> Stage B
                 (hydration) -> Stage C (judge, optional) -> Stage D (assembly)
find_similar():  same pipeline with the indexed vector of a source item as the
                 query and the source itself excluded; never judged
hidden_gems():   quality-vs-popularity ranking over the catalog with the same
                 exclusion discipline

Every external call is bounded by a timeout from SearchConfig. A failed or
timed-out embedding or exclusion lookup raises RetrievalFailed; judge
problems only change judge_status on the result.
"""

import asyncio
import logging
from typing import List, Optional, Protocol, Set

from ..errors import EmbeddingFailed, ExclusionLookupFailed, MediaNotFound, RetrievalFailed
from ..index import VectorIndex
from ..models.config import SearchConfig, resolve_config
from ..models.media import MediaRecord
from ..models.scoring import HydratedCandidate, JudgeStatus, Recommendation, SearchResult
from .assembly import (
    assemble_judged,
    assemble_positional,
    fallback_explanation,
    source_explanation,
    unjudged_explanation,
)
from .hidden_gems import rank_hidden_gems
from .hydration import hydrate_candidates
from .judge import VibeJudge
from .retrieval import build_exclusion_set, resolve_limit, retrieve_candidates

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    async def embed(self, text: str) -> List[float]:
        ...

    def model_name(self) -> str:
        ...


class CatalogStore(Protocol):
    """Store-side lookups the pipeline needs. Absence is never an error."""

    async def lookup_exclusion_ids_async(self, user_id: str) -> Set[str]:
        ...

    async def fetch_record_async(self, media_id: str) -> Optional[MediaRecord]:
        ...

    async def list_media_async(self) -> List[MediaRecord]:
        ...


class SearchOrchestrator:
    def __init__(
        self,
        index: VectorIndex,
        embedder: Embedder,
        store: CatalogStore,
        judge: Optional[VibeJudge] = None,
        config: Optional[SearchConfig] = None,
    ):
        self.index = index
        self.embedder = embedder
        self.store = store
        self.judge = judge
        self.config = resolve_config(config)

    # ------------------------------------------------------------------
    # External calls
    # ------------------------------------------------------------------

    async def _embed_query(self, text: str) -> List[float]:
        try:
            vector = await asyncio.wait_for(self.embedder.embed(text), self.config.embed_timeout_s)
        except asyncio.TimeoutError as e:
            logger.error("[search] EMBED_TIMEOUT after=%ss", self.config.embed_timeout_s)
            raise EmbeddingFailed(f"embedding timed out after {self.config.embed_timeout_s}s") from e
        except Exception as e:
            logger.error("[search] EMBED_FAILED error=%r", e)
            raise EmbeddingFailed(f"failed to generate query embedding: {e}") from e
        if vector is None or len(vector) == 0:
            raise EmbeddingFailed("embedding provider returned an empty vector")
        return list(vector)

    async def _exclusion_set(self, user_id: Optional[str], source_id: Optional[str] = None) -> Set[str]:
        """Seen ids for the user (fresh per request); no user means nothing seen."""
        seen: Set[str] = set()
        if user_id:
            try:
                seen = await asyncio.wait_for(
                    self.store.lookup_exclusion_ids_async(user_id),
                    self.config.exclusion_timeout_s,
                )
            except asyncio.TimeoutError as e:
                logger.error("[search] EXCLUSION_TIMEOUT user_id=%s", user_id)
                raise ExclusionLookupFailed(f"seen-media lookup timed out for user {user_id}") from e
            except Exception as e:
                logger.error("[search] EXCLUSION_FAILED user_id=%s error=%r", user_id, e)
                raise ExclusionLookupFailed(f"failed to get seen media: {e}") from e
        return build_exclusion_set(seen, source_id)

    def _source_vector(self, source_id: str) -> List[float]:
        """The source's indexed vector, so it always comes from the current embedding model."""
        vector = self.index.vector(source_id)
        if vector is None:
            raise MediaNotFound(source_id, what="embedding")
        return vector

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def search(
        self,
        user_id: Optional[str],
        query: str,
        top_k: int = 0,
        final_results: int = 0,
        use_judge: bool = True,
    ) -> SearchResult:
        """
        Vibe search for one user.

        Non-positive top_k / final_results fall back to the configured
        defaults. Raises EmbeddingFailed or ExclusionLookupFailed; an empty
        index or everything excluded is a successful empty result.
        """
        top_k = resolve_limit(top_k, self.config.top_k)
        final_results = resolve_limit(final_results, self.config.final_results)
        logger.info("[search] START user_id=%s top_k=%d final=%d judge=%s", user_id, top_k, final_results, use_judge)

        query_vector = await self._embed_query(query)
        excluded = await self._exclusion_set(user_id)

        candidates = retrieve_candidates(self.index, query_vector, top_k, excluded, self.config.top_k)
        if not candidates:
            logger.info("[search] EMPTY excluded=%d", len(excluded))
            return SearchResult(query=query, total_candidates=0, filtered_count=len(excluded))

        hydrated = await hydrate_candidates(self.store, candidates, self.config.hydration_timeout_s)
        recommendations, status = await self._rank(query, hydrated, final_results, use_judge)

        logger.info(
            "[search] DONE candidates=%d hydrated=%d results=%d judge_status=%s",
            len(candidates), len(hydrated), len(recommendations), status.value,
        )
        return SearchResult(
            recommendations=recommendations,
            query=query,
            total_candidates=len(candidates),
            filtered_count=len(excluded),
            judge_status=status,
        )

    async def _rank(
        self,
        query: str,
        hydrated: List[HydratedCandidate],
        limit: int,
        use_judge: bool,
    ):
        if not (use_judge and self.judge is not None and hydrated):
            return assemble_positional(hydrated, limit, unjudged_explanation), JudgeStatus.SKIPPED

        outcome = await self.judge.judge(query, hydrated)
        if outcome.ok and outcome.verdicts:
            return assemble_judged(hydrated, outcome.verdicts, limit), outcome.status

        if outcome.ok:
            logger.warning("[search] JUDGE_EMPTY no usable verdicts, using similarity order")
        return assemble_positional(hydrated, limit, fallback_explanation), JudgeStatus.DEGRADED

    async def find_similar(
        self,
        user_id: Optional[str],
        source_id: str,
        limit: int = 0,
    ) -> List[Recommendation]:
        """
        Items closest to source_id's indexed vector, excluding the source and
        the user's seen items. Raises MediaNotFound if the source has no vector.
        """
        limit = resolve_limit(limit, self.config.similar_default_limit)
        source_vector = self._source_vector(source_id)
        excluded = await self._exclusion_set(user_id, source_id)

        pool = limit * self.config.similar_pool_multiplier
        candidates = self.index.search(source_vector, pool, excluded)
        hydrated = await hydrate_candidates(self.store, candidates, self.config.hydration_timeout_s)
        recs = assemble_positional(hydrated, limit, source_explanation)
        logger.info("[similar] DONE source=%s pool=%d results=%d", source_id, len(candidates), len(recs))
        return recs

    async def hidden_gems(self, user_id: Optional[str], limit: int = 0) -> List[MediaRecord]:
        """High quality relative to popularity, unseen by the user."""
        limit = resolve_limit(limit, self.config.hidden_gems_default_limit)
        excluded = await self._exclusion_set(user_id)
        try:
            catalog = await asyncio.wait_for(self.store.list_media_async(), self.config.hydration_timeout_s)
        except asyncio.TimeoutError as e:
            raise RetrievalFailed("catalog listing timed out") from e
        except Exception as e:
            raise RetrievalFailed(f"failed to list media: {e}") from e
        gems = rank_hidden_gems(catalog, excluded, limit, self.config)
        logger.info("[gems] DONE catalog=%d excluded=%d results=%d", len(catalog), len(excluded), len(gems))
        return gems
