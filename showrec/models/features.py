"""Intermediate feature bundles handed to score models.

Plain dataclasses rather than Pydantic: they are re-derived on every pass,
never persisted, and never cross an API boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ProfileFeatures:
    """Raw profile counters in the shape the score models expect."""

    # Top-5 favourite-artist counts, largest first ([0] when empty).
    favorite_artists: list[float] = field(default_factory=lambda: [0.0])
    # Top-5 favourite-venue counts, largest first ([0] when empty).
    favorite_venues: list[float] = field(default_factory=lambda: [0.0])
    # Morning, afternoon, evening, late-night counts.
    time_preferences: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0, 0.0])
    day_preferences: list[float] = field(default_factory=lambda: [0.0])


@dataclass
class CandidateFeatures:
    """Per-candidate features."""

    artist_id: int = 0
    venue_id: int = 0
    # TimeOfDay index, 0..3.
    time_of_day: int = 0
    # 0 = Monday .. 6 = Sunday.
    day_of_week: int = 0
    has_event_link: int = 0
    has_map_link: int = 0


@dataclass(frozen=True)
class TrainingExample:
    """One labelled example for the learned scorer."""

    profile: ProfileFeatures
    candidate: CandidateFeatures
    label: float = 1.0
