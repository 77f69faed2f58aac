"""
Stage A: Retrieval

Builds the per-request exclusion set (seen media, plus the pinned source item
for find-similar) and pulls the top-k similarity candidates from the index
with that set anti-joined out.

The public entry points are build_exclusion_set and retrieve_candidates.
"""

from typing import Iterable, List, Optional, Set

from ..index import VectorIndex
from ..models.scoring import SearchCandidate


def build_exclusion_set(
    seen_ids: Optional[Iterable[str]],
    source_id: Optional[str] = None,
) -> Set[str]:
    """Fresh set of ids the user must not see. Never shared across requests."""
    excluded = set(seen_ids or ())
    if source_id:
        excluded.add(source_id)
    return excluded


def resolve_limit(value: Optional[int], default: int) -> int:
    """Non-positive or missing limits fall back to the configured default."""
    if value is None or value <= 0:
        return default
    return value


def retrieve_candidates(
    index: VectorIndex,
    query_vector: List[float],
    top_k: int,
    excluded_ids: Set[str],
    default_top_k: int = 20,
) -> List[SearchCandidate]:
    """Stage A: similarity search with the exclusion set applied."""
    return index.search(query_vector, resolve_limit(top_k, default_top_k), excluded_ids)
