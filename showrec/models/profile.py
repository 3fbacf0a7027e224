"""Affinity profile model built from a user's favourited shows."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from showrec.utils.datetime_helpers import TimeOfDay


class TimePreferences(BaseModel):
    """Histogram of favourites per time-of-day bucket."""

    model_config = ConfigDict(frozen=True)

    morning: int = 0
    afternoon: int = 0
    evening: int = 0
    late_night: int = 0

    def count(self, bucket: TimeOfDay) -> int:
        return getattr(self, bucket.value)

    def as_list(self) -> list[int]:
        """Counts in bucket-index order (morning, afternoon, evening, late night)."""
        return [self.morning, self.afternoon, self.evening, self.late_night]

    @property
    def total(self) -> int:
        return sum(self.as_list())


class AffinityProfile(BaseModel):
    """Aggregated preference counters for one user.

    Always rebuilt from the full favourites list, so ``total_interactions``
    equals the number of favourites at build time.
    """

    model_config = ConfigDict(frozen=True)

    favorite_artists: dict[str, int] = Field(default_factory=dict)
    favorite_venues: dict[str, int] = Field(default_factory=dict)
    time_preferences: TimePreferences = Field(default_factory=TimePreferences)
    # Weekday name -> count; empty when favourites carry no dates.
    day_preferences: dict[str, int] = Field(default_factory=dict)
    total_interactions: int = 0
    last_updated: datetime | None = None

    def artist_count(self, artist: str) -> int:
        return self.favorite_artists.get(artist, 0)

    def venue_count(self, venue: str) -> int:
        return self.favorite_venues.get(venue, 0)
