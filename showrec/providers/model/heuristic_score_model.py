"""Weighted-sum heuristic scorer.

Approximates what the network learns without any training data:

    artist affinity  × 0.4   (strongest artist count / 10, capped at 1)
    venue affinity   × 0.3   (strongest venue count / 10, capped at 1)
    time affinity    × 0.2   (share of favourites in the show's time bucket)
    link bonuses     ≤ 0.1   (ticket link 0.03, map link 0.02, base 0.05)

The sum goes through ``1 / (1 + e^(-(s - 0.5) * 4))`` so that an average
candidate lands near 0.5.
"""

from __future__ import annotations

import math
from typing import Any

from showrec.interfaces.score_model import IScoreModel
from showrec.models.features import CandidateFeatures, ProfileFeatures, TrainingExample
from showrec.utils.logging import get_logger

_ARTIST_WEIGHT = 0.4
_VENUE_WEIGHT = 0.3
_TIME_WEIGHT = 0.2
_EVENT_LINK_BONUS = 0.03
_MAP_LINK_BONUS = 0.02
_BASE_BONUS = 0.05
# Favourite count at which artist/venue affinity saturates.
_AFFINITY_SATURATION = 10.0
_SQUASH_CENTER = 0.5
_SQUASH_STEEPNESS = 4.0


def _numbers(values: Any) -> list[float]:
    out: list[float] = []
    try:
        for v in values or []:
            try:
                f = float(v)
            except (TypeError, ValueError):
                f = 0.0
            out.append(f if math.isfinite(f) else 0.0)
    except TypeError:
        return []
    return out


def _flag(value: Any) -> bool:
    try:
        return bool(float(value))
    except (TypeError, ValueError):
        return False


class HeuristicScoreModel(IScoreModel):
    """Deterministic fallback scorer; needs no initialisation or training."""

    def __init__(self) -> None:
        self._logger = get_logger(__name__)

    async def initialize(self) -> None:
        return None

    def score(
        self,
        profile_features: ProfileFeatures,
        candidate_features: CandidateFeatures,
    ) -> float:
        total = 0.0

        artists = _numbers(getattr(profile_features, "favorite_artists", None))
        if artists:
            total += min(max(artists) / _AFFINITY_SATURATION, 1.0) * _ARTIST_WEIGHT

        venues = _numbers(getattr(profile_features, "favorite_venues", None))
        if venues:
            total += min(max(venues) / _AFFINITY_SATURATION, 1.0) * _VENUE_WEIGHT

        times = _numbers(getattr(profile_features, "time_preferences", None))
        if len(times) >= 4:
            try:
                bucket = int(getattr(candidate_features, "time_of_day", -1))
            except (TypeError, ValueError):
                bucket = -1
            time_total = sum(times)
            if 0 <= bucket < 4 and time_total > 0:
                total += (times[bucket] / time_total) * _TIME_WEIGHT

        if _flag(getattr(candidate_features, "has_event_link", 0)):
            total += _EVENT_LINK_BONUS
        if _flag(getattr(candidate_features, "has_map_link", 0)):
            total += _MAP_LINK_BONUS
        total += _BASE_BONUS

        return 1.0 / (1.0 + math.exp(-(total - _SQUASH_CENTER) * _SQUASH_STEEPNESS))

    async def train(self, examples: list[TrainingExample]) -> bool:
        self._logger.debug("heuristic_model_training_skipped", examples=len(examples))
        return False

    def dispose(self) -> None:
        return None

    def get_model_name(self) -> str:
        return "heuristic"

    def is_available(self) -> bool:
        return True
