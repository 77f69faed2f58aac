"""
Stage B: Hydration

Resolves similarity hits to full media records. Ids that no longer resolve
(deleted between indexing and the request, lookup error, timeout) are
dropped and logged; they never fail the request.
"""

import asyncio
import logging
from typing import List, Optional, Protocol

from ..models.media import MediaRecord, ensure_media
from ..models.scoring import HydratedCandidate, SearchCandidate

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    """Anything that can fetch a media record by id (absence is not an error)."""

    async def fetch_record_async(self, media_id: str) -> Optional[MediaRecord]:
        ...


async def _fetch_one(
    source: RecordSource,
    candidate: SearchCandidate,
    timeout_s: float,
) -> Optional[HydratedCandidate]:
    try:
        record = await asyncio.wait_for(source.fetch_record_async(candidate.media_id), timeout_s)
    except asyncio.TimeoutError:
        logger.info("[hydrate] RECORD_MISSING media_id=%s reason=timeout", candidate.media_id)
        return None
    except Exception as e:
        logger.info("[hydrate] RECORD_MISSING media_id=%s reason=%r", candidate.media_id, e)
        return None
    if record is None:
        logger.info("[hydrate] RECORD_MISSING media_id=%s reason=absent", candidate.media_id)
        return None
    return HydratedCandidate(media=ensure_media(record), similarity=candidate.similarity)


async def hydrate_candidates(
    source: RecordSource,
    candidates: List[SearchCandidate],
    timeout_s: float = 10.0,
) -> List[HydratedCandidate]:
    """Fetch records concurrently; output keeps the input (similarity) order."""
    if not candidates:
        return []
    results = await asyncio.gather(*(_fetch_one(source, c, timeout_s) for c in candidates))
    return [r for r in results if r is not None]
