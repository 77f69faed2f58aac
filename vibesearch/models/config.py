"""
Search configuration: retrieval, judging, hidden-gems and timeout parameters.

SearchConfig defaults are defined here. The service may pass a dict
(e.g. from a JSON file named by SEARCH_CONFIG_PATH); from_dict() merges it with these defaults.
"""

from typing import Dict, Optional

from pydantic import BaseModel, model_validator


class SearchConfig(BaseModel):
    """Configuration for the vibe search pipeline."""

    # -------------------------------------------------------------------------
    # Retrieval
    # -------------------------------------------------------------------------

    # Candidates pulled from the vector index per query (used when a caller passes <= 0).
    top_k: int = 20

    # Recommendations returned after judging (used when a caller passes <= 0).
    final_results: int = 10

    # -------------------------------------------------------------------------
    # Judge
    # -------------------------------------------------------------------------

    # Max verdicts kept from the reranker. Also the size of the parse-failure default set.
    max_verdicts: int = 3

    # Sampling temperature for the rerank prompt. Low = stable orderings.
    judge_temperature: float = 0.3

    # -------------------------------------------------------------------------
    # Find-similar
    # -------------------------------------------------------------------------

    # Pool size is limit * multiplier so dropped records can be backfilled.
    similar_pool_multiplier: int = 2
    similar_default_limit: int = 10

    # -------------------------------------------------------------------------
    # Hidden gems
    # eligible: quality > popularity * gem_eligibility_ratio
    # score:    quality - popularity * gem_popularity_penalty
    # -------------------------------------------------------------------------

    gem_eligibility_ratio: float = 0.5
    gem_popularity_penalty: float = 0.3
    hidden_gems_default_limit: int = 10

    # Cap on a single quality boost contribution from ingestion.
    max_quality_boost: float = 2.0

    # -------------------------------------------------------------------------
    # Timeouts (seconds) for external calls
    # -------------------------------------------------------------------------

    embed_timeout_s: float = 30.0
    exclusion_timeout_s: float = 10.0
    hydration_timeout_s: float = 10.0
    judge_timeout_s: float = 60.0

    @model_validator(mode="after")
    def check_bounds(self):
        for name in ("embed_timeout_s", "exclusion_timeout_s", "hydration_timeout_s", "judge_timeout_s"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if not 0 < self.gem_eligibility_ratio <= 1:
            raise ValueError(f"gem_eligibility_ratio must be in (0, 1], got {self.gem_eligibility_ratio}")
        for name in ("top_k", "final_results", "max_verdicts", "similar_pool_multiplier"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        return self

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "SearchConfig":
        """Create config from dictionary (e.g., loaded from JSON)."""
        flat = {}
        if "retrieval" in config_dict:
            flat.update(config_dict["retrieval"])
        if "judge" in config_dict:
            judge = config_dict["judge"]
            if "max_verdicts" in judge:
                flat["max_verdicts"] = judge["max_verdicts"]
            if "temperature" in judge:
                flat["judge_temperature"] = judge["temperature"]
        if "hidden_gems" in config_dict:
            hg = config_dict["hidden_gems"]
            if "eligibility_ratio" in hg:
                flat["gem_eligibility_ratio"] = hg["eligibility_ratio"]
            if "popularity_penalty" in hg:
                flat["gem_popularity_penalty"] = hg["popularity_penalty"]
            if "default_limit" in hg:
                flat["hidden_gems_default_limit"] = hg["default_limit"]
        if "timeouts" in config_dict:
            for key, value in config_dict["timeouts"].items():
                flat[f"{key}_timeout_s"] = value
        # Flat keys win over grouped ones
        flat.update({k: v for k, v in config_dict.items() if not isinstance(v, dict)})
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_CONFIG = SearchConfig()


def resolve_config(config: Optional["SearchConfig"]) -> "SearchConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
