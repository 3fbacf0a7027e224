"""Data models for showrec: catalog shows, profiles, features and recommendations."""

from showrec.models.features import CandidateFeatures, ProfileFeatures, TrainingExample
from showrec.models.profile import AffinityProfile, TimePreferences
from showrec.models.recommendation import (
    ComponentScores,
    Recommendation,
    RecommendationExplanation,
)
from showrec.models.show import EventDay, Show

__all__ = [
    "AffinityProfile",
    "CandidateFeatures",
    "ComponentScores",
    "EventDay",
    "ProfileFeatures",
    "Recommendation",
    "RecommendationExplanation",
    "Show",
    "TimePreferences",
    "TrainingExample",
]
