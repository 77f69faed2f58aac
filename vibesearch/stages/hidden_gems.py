"""
Hidden gems: items whose quality is high relative to their popularity.

    eligible: quality > popularity * eligibility_ratio
    score:    quality - popularity * popularity_penalty

Excluded ids are removed before truncation, so the caller always gets up to
`limit` unseen items when that many are eligible.
"""

from typing import Iterable, List, Set

from ..models.config import SearchConfig
from ..models.media import MediaRecord, ensure_media_list


def is_hidden_gem(media: MediaRecord, eligibility_ratio: float = 0.5) -> bool:
    return media.quality_score > media.popularity_score * eligibility_ratio


def gem_score(media: MediaRecord, popularity_penalty: float = 0.3) -> float:
    return media.quality_score - media.popularity_score * popularity_penalty


def rank_hidden_gems(
    catalog: Iterable[MediaRecord],
    excluded_ids: Set[str],
    limit: int,
    config: SearchConfig,
) -> List[MediaRecord]:
    """Eligible, unexcluded items by gem score descending (ties by id)."""
    scored = [
        (m, gem_score(m, config.gem_popularity_penalty))
        for m in ensure_media_list(list(catalog))
        if m.id not in excluded_ids and is_hidden_gem(m, config.gem_eligibility_ratio)
    ]
    scored.sort(key=lambda item: (-item[1], item[0].id))
    return [m for m, _ in scored[:limit]]
