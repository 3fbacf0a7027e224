"""Maps an affinity profile and a candidate show to model features.

Two stages:

1. :meth:`FeatureEncoder.profile_features` / :meth:`candidate_features`
   pull raw counters out of the domain models.  The heuristic scorer
   works directly on these.
2. :meth:`FeatureEncoder.encode` normalises and flattens both into the
   fixed 10-element vector the neural scorer consumes:

   ====  ============================================================
   idx   feature
   ====  ============================================================
   0     strongest favourite-artist count (self-normalised: 0 or 1)
   1     strongest favourite-venue count (self-normalised: 0 or 1)
   2-5   time-of-day histogram / its max
   6     first weekday count / max
   7     artist name hash % 1000 / 1000
   8     venue name hash % 1000 / 1000
   9     candidate time-of-day bucket / 4
   ====  ============================================================

   The flat list continues with weekday, ticket-link and map-link
   features, but is cut to the first 10 so the layout matches the
   trained network's input width.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from showrec.models.features import CandidateFeatures, ProfileFeatures
from showrec.models.profile import AffinityProfile
from showrec.models.show import Show
from showrec.utils.datetime_helpers import TimeOfDay, parse_event_date, parse_hour

FEATURE_VECTOR_LENGTH = 10
HASH_VOCAB_SIZE = 1000
_TOP_N = 5
# Hour assumed for a show listed without a time.
_DEFAULT_HOUR = 12


def string_hash(text: str) -> int:
    """Polynomial rolling hash (×31) with 32-bit signed wrap-around, made non-negative.

    Stable across processes, unlike ``hash()``.
    """
    value = 0
    for ch in text:
        value = (value * 31 + ord(ch)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def _as_float(value: Any) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def _normalize(values: Iterable[Any] | None) -> list[float]:
    """Divide by the max (at least 1); ``[0.0]`` for empty input."""
    numbers = [_as_float(v) for v in values or []]
    if not numbers:
        return [0.0]
    peak = max(max(numbers), 1.0)
    return [n / peak for n in numbers]


def _top_counts(counts: dict[str, int]) -> list[float]:
    top = sorted(counts.values(), reverse=True)[:_TOP_N]
    return [float(c) for c in top] if top else [0.0]


class FeatureEncoder:
    """Stateless feature extraction shared by both score models."""

    def profile_features(self, profile: AffinityProfile) -> ProfileFeatures:
        return ProfileFeatures(
            favorite_artists=_top_counts(profile.favorite_artists),
            favorite_venues=_top_counts(profile.favorite_venues),
            time_preferences=[float(c) for c in profile.time_preferences.as_list()],
            day_preferences=[float(c) for c in profile.day_preferences.values()] or [0.0],
        )

    def candidate_features(self, show: Show, event_date: str | None = None) -> CandidateFeatures:
        if show.time:
            hour = parse_hour(show.time)
            # Present but unreadable times land in the late-night bucket.
            bucket = TimeOfDay.from_hour(hour if hour is not None else -1)
        else:
            bucket = TimeOfDay.from_hour(_DEFAULT_HOUR)

        parsed_date = parse_event_date(event_date or show.event_date)
        return CandidateFeatures(
            artist_id=string_hash(show.artist) % HASH_VOCAB_SIZE,
            venue_id=string_hash(show.venue) % HASH_VOCAB_SIZE,
            time_of_day=bucket.index,
            day_of_week=parsed_date.weekday() if parsed_date else 0,
            has_event_link=1 if show.event_link else 0,
            has_map_link=1 if show.map_link else 0,
        )

    def encode(
        self,
        profile_features: ProfileFeatures,
        candidate_features: CandidateFeatures,
    ) -> list[float]:
        """Flatten into exactly :data:`FEATURE_VECTOR_LENGTH` floats."""
        pf, cf = profile_features, candidate_features
        artists = _normalize(getattr(pf, "favorite_artists", None))
        venues = _normalize(getattr(pf, "favorite_venues", None))
        times = _normalize(getattr(pf, "time_preferences", None))
        days = _normalize(getattr(pf, "day_preferences", None))

        vector = [
            artists[0],
            venues[0],
            *(times + [0.0] * 4)[:4],
            days[0],
            _as_float(getattr(cf, "artist_id", 0)) / HASH_VOCAB_SIZE,
            _as_float(getattr(cf, "venue_id", 0)) / HASH_VOCAB_SIZE,
            _as_float(getattr(cf, "time_of_day", 0)) / 4,
            _as_float(getattr(cf, "day_of_week", 0)) / 7,
            _as_float(getattr(cf, "has_event_link", 0)),
            _as_float(getattr(cf, "has_map_link", 0)),
        ]
        vector = vector[:FEATURE_VECTOR_LENGTH]
        vector.extend([0.0] * (FEATURE_VECTOR_LENGTH - len(vector)))
        return vector
