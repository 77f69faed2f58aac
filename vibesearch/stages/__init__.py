"""Pipeline stages: retrieval (A), hydration (B), judge (C), assembly (D), plus hidden gems and the orchestrator."""

from .assembly import assemble_judged, assemble_positional
from .hidden_gems import rank_hidden_gems
from .hydration import hydrate_candidates
from .judge import ChatCompletion, JudgeOutcome, VibeJudge, parse_json_response
from .orchestrator import SearchOrchestrator
from .retrieval import build_exclusion_set, retrieve_candidates

__all__ = [
    "ChatCompletion",
    "JudgeOutcome",
    "SearchOrchestrator",
    "VibeJudge",
    "assemble_judged",
    "assemble_positional",
    "build_exclusion_set",
    "hydrate_candidates",
    "parse_json_response",
    "rank_hidden_gems",
    "retrieve_candidates",
]
