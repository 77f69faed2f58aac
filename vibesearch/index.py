"""
In-memory vector index for vibe embeddings.

Exhaustive cosine scan over id -> vector pairs with exclusion support (the
anti-join that removes already-seen media). The catalog is hundreds to low
thousands of items, so a full O(n·d) scan per query is the whole algorithm.

Callers only see upsert / remove / size / search (plus bulk load at startup
and vector() lookups);
nothing about the scan leaks into the search contract, so an approximate
index can replace it behind the same methods.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .models.scoring import SearchCandidate
from .utils.similarity import cosine_from_norms, cosine_similarity, vector_norm

logger = logging.getLogger(__name__)

__all__ = ["ReadWriteLock", "VectorIndex", "cosine_similarity"]


class ReadWriteLock:
    """
    Many concurrent readers or one writer.

    Writers are preferred: once a writer is waiting, new readers queue behind it
    so a steady read load cannot starve ingestion.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


def _freeze(vector: Sequence[float]) -> Tuple[np.ndarray, float]:
    """Copy to a read-only float32 array and precompute its norm."""
    arr = np.array(vector, dtype=np.float32).ravel()
    arr.setflags(write=False)
    return arr, vector_norm(arr.astype(np.float64))


class VectorIndex:
    """One embedding per media id; last write wins."""

    def __init__(self, vectors: Optional[Mapping[str, Sequence[float]]] = None):
        self._lock = ReadWriteLock()
        self._vectors: Dict[str, Tuple[np.ndarray, float]] = {}
        if vectors:
            self.load(vectors)

    def load(self, vectors: Mapping[str, Sequence[float]]) -> None:
        """Replace the whole index (startup load from the store)."""
        frozen = {media_id: _freeze(vec) for media_id, vec in vectors.items()}
        with self._lock.write():
            self._vectors = frozen
        logger.info("[index] LOADED size=%d", len(frozen))

    def upsert(self, media_id: str, vector: Sequence[float]) -> None:
        """Insert or replace the vector for media_id."""
        # Build outside the lock so readers never see a half-built entry
        entry = _freeze(vector)
        with self._lock.write():
            self._vectors[media_id] = entry

    def remove(self, media_id: str) -> None:
        """Delete an entry; no-op if absent."""
        with self._lock.write():
            self._vectors.pop(media_id, None)

    def size(self) -> int:
        with self._lock.read():
            return len(self._vectors)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, media_id: object) -> bool:
        with self._lock.read():
            return media_id in self._vectors

    def vector(self, media_id: str) -> Optional[List[float]]:
        """The indexed vector for media_id, or None."""
        with self._lock.read():
            entry = self._vectors.get(media_id)
        return entry[0].tolist() if entry is not None else None

    def search(
        self,
        query: Sequence[float],
        top_k: int,
        exclude: Optional[Iterable[str]] = None,
    ) -> List[SearchCandidate]:
        """
        Up to top_k candidates by cosine similarity, descending, skipping excluded ids.

        Equal similarities are ordered by media id so results are reproducible
        for a given index snapshot. An empty index returns [].
        """
        if top_k <= 0:
            raise ValueError(f"top_k must be positive, got {top_k}")
        excluded = exclude if isinstance(exclude, (set, frozenset)) else set(exclude or ())
        q, q_norm = _freeze(query)
        q64 = q.astype(np.float64)

        scored: List[Tuple[str, float]] = []
        with self._lock.read():
            for media_id, (vec, norm) in self._vectors.items():
                if media_id in excluded:
                    continue
                scored.append((media_id, cosine_from_norms(q64, q_norm, vec.astype(np.float64), norm)))

        scored.sort(key=lambda item: (-item[1], item[0]))
        return [
            SearchCandidate(media_id=media_id, similarity=sim)
            for media_id, sim in scored[:top_k]
        ]

