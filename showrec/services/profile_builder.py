"""Builds an :class:`AffinityProfile` from the user's favourited shows.

The profile is recomputed from scratch on every call, never patched, so
the same favourites always produce the same counters (``last_updated``
aside).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from datetime import datetime, timezone

from showrec.models.profile import AffinityProfile, TimePreferences
from showrec.models.show import Show
from showrec.utils.datetime_helpers import time_of_day, weekday_name
from showrec.utils.logging import get_logger


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class AffinityProfileBuilder:
    """Derives preference counters from a favourites list."""

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock
        self._logger = get_logger(__name__)

    def build(self, favorites: list[Show]) -> AffinityProfile:
        """Count artists, venues, time buckets and weekdays across *favorites*.

        Shows whose time cannot be parsed are left out of the time
        histogram; shows without a parseable date are left out of the
        weekday histogram.  An empty list yields an all-zero profile.
        """
        artists: Counter[str] = Counter()
        venues: Counter[str] = Counter()
        buckets: Counter[str] = Counter()
        days: Counter[str] = Counter()

        for show in favorites:
            artists[show.artist] += 1
            venues[show.venue] += 1
            bucket = time_of_day(show.time)
            if bucket is not None:
                buckets[bucket.value] += 1
            day = weekday_name(show.event_date)
            if day is not None:
                days[day] += 1

        profile = AffinityProfile(
            favorite_artists=dict(artists),
            favorite_venues=dict(venues),
            time_preferences=TimePreferences(**buckets),
            day_preferences=dict(days),
            total_interactions=len(favorites),
            last_updated=self._clock(),
        )
        self._logger.debug(
            "affinity_profile_built",
            interactions=profile.total_interactions,
            artists=len(profile.favorite_artists),
            venues=len(profile.favorite_venues),
        )
        return profile
