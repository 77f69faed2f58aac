"""
Stage D: Assembly

Turns hydrated candidates (similarity order) plus an optional verdict list
into the final recommendation list. Ranks are always 1..n.

With verdicts: judged items come first in verdict order with the judge's
explanation; leftover slots are filled from the remaining candidates in
similarity order. Without verdicts: positional similarity order.
"""

from typing import Callable, Dict, List, Optional

from ..models.scoring import HydratedCandidate, Recommendation, RerankVerdict

ExplainFn = Callable[[HydratedCandidate], str]


def fallback_explanation(candidate: HydratedCandidate) -> str:
    """Judge failed or returned nothing usable."""
    return f"Vibe match based on: {candidate.media.vibe_profile}"


def unjudged_explanation(candidate: HydratedCandidate) -> str:
    """Judge disabled or not configured."""
    return f"Vibe match: {candidate.media.vibe_profile}"


def fill_explanation(candidate: HydratedCandidate) -> str:
    return f"Similar vibe: {candidate.media.vibe_profile}"


def source_explanation(candidate: HydratedCandidate) -> str:
    return f"Similar vibe to source: {candidate.media.vibe_profile}"


def _recommend(candidate: HydratedCandidate, rank: int, explanation: str) -> Recommendation:
    return Recommendation(
        media=candidate.media,
        vibe_score=candidate.similarity,
        explanation=explanation,
        rank=rank,
    )


def assemble_positional(
    candidates: List[HydratedCandidate],
    limit: int,
    explain: ExplainFn = fallback_explanation,
) -> List[Recommendation]:
    """Top `limit` candidates in the order given, ranked positionally."""
    return [
        _recommend(c, rank, explain(c))
        for rank, c in enumerate(candidates[:limit], start=1)
    ]


def assemble_judged(
    candidates: List[HydratedCandidate],
    verdicts: List[RerankVerdict],
    limit: int,
    fill_explain: Optional[ExplainFn] = None,
) -> List[Recommendation]:
    """
    Judged items first, then fill from leftovers by similarity.

    `placed` is the ordered set of ids already in the output; a candidate is
    appended only if it is not in it, so no id appears twice.
    """
    fill_explain = fill_explain or fill_explanation
    by_id: Dict[str, HydratedCandidate] = {c.media.id: c for c in candidates}
    placed: Dict[str, None] = {}
    recs: List[Recommendation] = []

    for verdict in verdicts:
        if len(recs) >= limit:
            break
        candidate = by_id.get(verdict.media_id)
        if candidate is None or verdict.media_id in placed:
            continue
        placed[verdict.media_id] = None
        recs.append(_recommend(candidate, len(recs) + 1, verdict.explanation))

    for candidate in candidates:
        if len(recs) >= limit:
            break
        if candidate.media.id in placed:
            continue
        placed[candidate.media.id] = None
        recs.append(_recommend(candidate, len(recs) + 1, fill_explain(candidate)))

    return recs
