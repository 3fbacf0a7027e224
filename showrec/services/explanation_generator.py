"""Deterministic, point-scored explanations for recommendations.

Each signal that fires adds points and (usually) a reason string:

    artist favourited before   min(count * 20, 40)
    venue visited before       min(count * 15, 30)
    time-of-day preference     up to 20, only if the bucket holds >30% of favourites
    model confidence           up to 10, only if the raw score > 0.5
                               ("strong match" reason only above 0.7)
    happening soon             2 * (7 - days_until) for events 0-7 days out
                               ("happening soon" reason only within 3 days)

``confidence = min(points / 100, 1)``.  A genre overlap adds a reason but
no points.  The model and recency boosts can add points without a reason;
an explanation with no reasons always reports confidence 0.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

from showrec.models.profile import AffinityProfile
from showrec.models.recommendation import RecommendationExplanation
from showrec.models.show import Show
from showrec.services.genre_matcher import normalize_genre
from showrec.utils.datetime_helpers import days_until, time_of_day

_MAX_POINTS = 100.0
_ARTIST_POINTS_PER_FAVORITE = 20
_ARTIST_POINTS_CAP = 40
_VENUE_POINTS_PER_FAVORITE = 15
_VENUE_POINTS_CAP = 30
_TIME_POINTS_CAP = 20.0
_TIME_SHARE_THRESHOLD = 30.0
_MODEL_THRESHOLD = 0.5
_STRONG_MODEL_THRESHOLD = 0.7
_MODEL_POINTS_CAP = 10.0
_RECENCY_WINDOW_DAYS = 7
_RECENCY_POINTS_PER_DAY = 2
_SOON_DAYS = 3
_GENERIC_EXPLANATION = "Similar to events you might enjoy"
_MAX_GENRES_IN_REASON = 2


def summarize_reasons(reasons: list[str]) -> str:
    if not reasons:
        return _GENERIC_EXPLANATION
    if len(reasons) == 1:
        return reasons[0]
    if len(reasons) == 2:
        return f"{reasons[0]} and {reasons[1]}"
    remaining = len(reasons) - 2
    suffix = "s" if remaining > 1 else ""
    return f"{reasons[0]}, {reasons[1]}, and {remaining} more reason{suffix}"


class ExplanationGenerator:
    """Builds a :class:`RecommendationExplanation` for one candidate."""

    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._today = today

    def generate(
        self,
        show: Show,
        profile: AffinityProfile,
        model_score: float,
        event_date: str | None = None,
        genres: list[str] | None = None,
        profile_genres: dict[str, int] | None = None,
    ) -> RecommendationExplanation:
        reasons: list[str] = []
        points = 0.0

        artist_count = profile.artist_count(show.artist)
        if artist_count > 0:
            points += min(artist_count * _ARTIST_POINTS_PER_FAVORITE, _ARTIST_POINTS_CAP)
            if artist_count == 1:
                reasons.append(f"You've favorited {show.artist} before")
            else:
                reasons.append(f"You've favorited {show.artist} {artist_count} times")

        venue_count = profile.venue_count(show.venue)
        if venue_count > 0:
            points += min(venue_count * _VENUE_POINTS_PER_FAVORITE, _VENUE_POINTS_CAP)
            if venue_count == 1:
                reasons.append(f"You've been to {show.venue} before")
            else:
                reasons.append(f"You've been to {show.venue} {venue_count} times")

        bucket = time_of_day(show.time)
        total_time = profile.time_preferences.total
        if bucket is not None and total_time > 0:
            share = profile.time_preferences.count(bucket) / total_time * 100
            if share > _TIME_SHARE_THRESHOLD:
                points += min(share / 100 * _TIME_POINTS_CAP, _TIME_POINTS_CAP)
                reasons.append(f"Matches your {bucket.label} preference")

        if genres and profile_genres:
            shared = [g for g in genres if normalize_genre(g) in profile_genres]
            if shared:
                reasons.append("Similar genre: " + ", ".join(shared[:_MAX_GENRES_IN_REASON]))

        if model_score > _MODEL_THRESHOLD:
            points += min((model_score - _MODEL_THRESHOLD) * 20, _MODEL_POINTS_CAP)
            if model_score > _STRONG_MODEL_THRESHOLD:
                reasons.append("Strong match based on your patterns")

        until = days_until(event_date, self._today())
        if until is not None and 0 <= until <= _RECENCY_WINDOW_DAYS:
            points += (_RECENCY_WINDOW_DAYS - until) * _RECENCY_POINTS_PER_DAY
            if until <= _SOON_DAYS:
                reasons.append("Happening soon")

        confidence = min(points / _MAX_POINTS, 1.0) if reasons else 0.0
        return RecommendationExplanation(
            explanation=summarize_reasons(reasons),
            reasons=reasons,
            confidence=max(confidence, 0.0),
        )
