"""
Stage C: Judge

Wraps an external chat-completion capability as a vibe reranker. The model
sees the query plus candidate vibe profiles and returns its top picks with
explanations.

The adapter never raises. It returns a JudgeOutcome:
- JUDGED: verdicts parsed and validated against the candidate set
- PARSE_FALLBACK: output was not usable JSON; the first max_verdicts
  candidates in similarity order are returned as default verdicts
- DEGRADED: the capability raised or timed out; no verdicts

Usage:
    judge = VibeJudge(chat_client, max_verdicts=3)
    outcome = await judge.judge("rainy neon melancholy", hydrated_candidates)
"""

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, ValidationError

from ..errors import JudgeDegraded
from ..models.scoring import HydratedCandidate, JudgeStatus, RerankVerdict

logger = logging.getLogger(__name__)


class ChatCompletion(Protocol):
    """External LLM capability: system + user prompt in, raw text out."""

    async def complete(self, system_prompt: str, user_prompt: str, temperature: float = 0.3) -> str:
        ...


# ============================================================================
# Response schema
# ============================================================================

class _Ranking(BaseModel):
    media_id: str
    rank: int
    explanation: str = ""


class _RerankResponse(BaseModel):
    rankings: List[_Ranking]


@dataclass
class JudgeOutcome:
    """Tagged result of one judge call."""

    status: JudgeStatus
    verdicts: List[RerankVerdict] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (JudgeStatus.JUDGED, JudgeStatus.PARSE_FALLBACK)


# ============================================================================
# Prompts
# ============================================================================

SYSTEM_PROMPT = """You are a recommendation curator who understands VIBES, not just genres.
When a user asks for something "like X but focused on Y," you understand the FEELING they're chasing.

Your job is to rank candidates based on how well they capture the specific VIBE the user wants.
Genre similarity is secondary to emotional/aesthetic similarity.

Respond in this exact JSON format:
{{
  "rankings": [
    {{"media_id": "...", "rank": 1, "explanation": "..."}},
    {{"media_id": "...", "rank": 2, "explanation": "..."}}
  ]
}}

Only include the top {max_verdicts} best matches. Ranks start at 1 and must not repeat.
Be specific in explanations about WHY each matches the vibe, using only the descriptions given."""


def build_judge_prompt(query: str, candidates: List[HydratedCandidate], max_verdicts: int) -> str:
    """User prompt listing candidates in similarity order."""
    lines = [f"{i}. {c.media.describe()}" for i, c in enumerate(candidates, start=1)]
    return (
        f'User\'s vibe request: "{query}"\n\n'
        "Candidates to rank (with their vibe profiles):\n"
        + "\n".join(lines)
        + f"\n\nRank the TOP {max_verdicts} that best capture the user's requested vibe. "
        "Explain why each matches."
    )


# ============================================================================
# JSON Parsing
# ============================================================================

def parse_json_response(content: str) -> Dict[str, Any]:
    """
    Parse a JSON object from LLM output.

    Handles a bare object, one wrapped in a markdown code fence, and one
    embedded in surrounding prose.

    Raises:
        ValueError: If no JSON object can be recovered
    """
    content = (content or "").strip()

    try:
        data = json.loads(content)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    match = re.search(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", content)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError:
            pass

    match = re.search(r"\{[\s\S]*\}", content)
    if match:
        try:
            return json.loads(match.group())
        except json.JSONDecodeError:
            pass

    raise ValueError(f"Could not parse JSON from response: {content[:200]}")


def fallback_explanation(candidate: HydratedCandidate) -> str:
    return f"Matches your vibe based on: {candidate.media.vibe_profile}"


def default_verdicts(candidates: List[HydratedCandidate], max_verdicts: int) -> List[RerankVerdict]:
    """First max_verdicts candidates in original order, explained from their own profiles."""
    return [
        RerankVerdict(media_id=c.media.id, rank=i, explanation=fallback_explanation(c))
        for i, c in enumerate(candidates[:max_verdicts], start=1)
    ]


def validate_verdicts(
    rankings: List[_Ranking],
    candidates: List[HydratedCandidate],
    max_verdicts: int,
) -> List[RerankVerdict]:
    """
    Keep verdicts whose id is a candidate, first occurrence only, ordered by the
    judge's rank and renumbered 1..n, at most max_verdicts.
    """
    by_id = {c.media.id: c for c in candidates}
    kept: List[_Ranking] = []
    seen = set()
    for r in sorted(rankings, key=lambda r: r.rank):
        if r.media_id not in by_id:
            logger.info("[judge] VERDICT_DROPPED unknown media_id=%s", r.media_id)
            continue
        if r.media_id in seen:
            continue
        seen.add(r.media_id)
        kept.append(r)
    return [
        RerankVerdict(
            media_id=r.media_id,
            rank=i,
            explanation=r.explanation.strip() or fallback_explanation(by_id[r.media_id]),
        )
        for i, r in enumerate(kept[:max_verdicts], start=1)
    ]


# ============================================================================
# Adapter
# ============================================================================

class VibeJudge:
    """Judge adapter over a ChatCompletion capability."""

    def __init__(
        self,
        chat: ChatCompletion,
        max_verdicts: int = 3,
        temperature: float = 0.3,
        timeout_s: float = 60.0,
    ):
        self.chat = chat
        self.max_verdicts = max_verdicts
        self.temperature = temperature
        self.timeout_s = timeout_s

    async def _call(self, query: str, candidates: List[HydratedCandidate]) -> str:
        system_prompt = SYSTEM_PROMPT.format(max_verdicts=self.max_verdicts)
        user_prompt = build_judge_prompt(query, candidates, self.max_verdicts)
        try:
            return await asyncio.wait_for(
                self.chat.complete(system_prompt, user_prompt, temperature=self.temperature),
                self.timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise JudgeDegraded(f"judge timed out after {self.timeout_s}s") from e
        except Exception as e:
            raise JudgeDegraded(f"judge call failed: {e}") from e

    async def judge(self, query: str, candidates: List[HydratedCandidate]) -> JudgeOutcome:
        """Rerank candidates; see module docstring for the outcome variants."""
        if not candidates:
            return JudgeOutcome(status=JudgeStatus.SKIPPED)

        logger.info("[judge] CALL candidates=%d", len(candidates))
        try:
            content = await self._call(query, candidates)
        except JudgeDegraded as e:
            logger.warning("[judge] DEGRADED %s", e)
            return JudgeOutcome(status=JudgeStatus.DEGRADED, error=str(e))

        try:
            parsed = _RerankResponse.model_validate(parse_json_response(content))
        except (ValueError, ValidationError) as e:
            logger.warning("[judge] PARSE_FAILURE %s", str(e)[:200])
            return JudgeOutcome(
                status=JudgeStatus.PARSE_FALLBACK,
                verdicts=default_verdicts(candidates, self.max_verdicts),
                error=str(e),
            )

        verdicts = validate_verdicts(parsed.rankings, candidates, self.max_verdicts)
        logger.info("[judge] OK verdicts=%d raw=%d", len(verdicts), len(parsed.rankings))
        return JudgeOutcome(status=JudgeStatus.JUDGED, verdicts=verdicts)
