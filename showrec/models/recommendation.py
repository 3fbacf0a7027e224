"""Recommendation models for the showrec pipeline.

A :class:`Recommendation` is created fresh on every orchestration pass,
persisted as a flat list by the recommendation store, and filtered for
past dates when read back.  Frozen so a stored list cannot be mutated by
consumers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from showrec.models.show import Show


class RecommendationExplanation(BaseModel):
    """Human-readable rationale for one recommendation."""

    model_config = ConfigDict(frozen=True)

    # One-line summary built from the reasons.
    explanation: str
    reasons: list[str] = Field(default_factory=list)
    # Reason points / 100, clamped to [0, 1].
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class ComponentScores(BaseModel):
    """The individual signals that were blended into ``Recommendation.score``."""

    model_config = ConfigDict(frozen=True)

    # 0–70: artist and venue favourite counts.
    rule_based: float = 0.0
    # 0–1: learned or heuristic score model.
    learned: float = 0.0
    # 0–1: share of the show's genres the user likes.
    genre: float = 0.0
    # 0–1: remapped cosine similarity of description embeddings.
    two_tower: float = 0.0


class Recommendation(BaseModel):
    """A scored, explained candidate show."""

    model_config = ConfigDict(frozen=True)

    show: Show
    # Blended score on the 0–100 scale (may exceed 100, see BlendWeights).
    score: float
    components: ComponentScores = Field(default_factory=ComponentScores)
    explanation: RecommendationExplanation
    # Day header of the listing the show came from.
    event_date: str | None = None

    @property
    def ml_score(self) -> float:
        return self.components.learned
