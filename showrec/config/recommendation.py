"""Tunable constants for the recommendation engine.

The blend weights are empirical and not renormalised: the four
weighted components can jointly exceed 100.  They live here so deployments
can override them from ``config/config.yaml`` without touching code.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BlendWeights(BaseModel):
    """Weights applied to each signal when blending on the 0–100 scale."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Cosine similarity of description embeddings (0–1, scaled by 100).
    two_tower: float = 0.35
    # Rule-based score is already on a 0–70 scale.
    rule_based: float = 0.5
    # Genre overlap (0–1, scaled by 100).
    genre: float = 0.2
    # Learned / heuristic model score (0–1, scaled by 100).
    learned: float = 0.10


class RecommendationConfig(BaseModel):
    """All knobs used by the services, scheduler, and caches."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    min_interactions: int = 3
    default_limit: int = 10
    keep_threshold: float = 20.0
    weights: BlendWeights = Field(default_factory=BlendWeights)

    embedding_batch_size: int = Field(default=30, ge=1)
    genre_profile_max_artists: int = Field(default=20, ge=1)
    embedding_cache_max_entries: int = Field(default=300, ge=1)
    embedding_cache_ttl_seconds: int = 7 * 24 * 60 * 60
    genre_cache_ttl_seconds: int = 7 * 24 * 60 * 60

    training_min_favorites: int = 10
    training_min_growth: int = 3
    recompute_quiet_period_ms: int = Field(default=500, ge=500)
    training_quiet_period_ms: int = Field(default=2000, ge=2000)

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> RecommendationConfig:
        """Build from the ``recommendation`` section of the loaded config."""
        return cls.model_validate(data or {})
