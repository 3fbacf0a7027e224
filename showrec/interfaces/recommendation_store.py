"""Abstract base class for recommendation persistence.

Stores the last computed recommendation list (and the profile it was
built from) so a restarted host can show something before the first
computation finishes.  Every operation is best-effort: failures are
logged and reported as "no cached data", never raised.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from showrec.models.profile import AffinityProfile
from showrec.models.recommendation import Recommendation


class IRecommendationStore(ABC):
    """Contract for recommendation list persistence."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create backing storage if needed."""

    @abstractmethod
    async def save_list(self, recommendations: list[Recommendation]) -> None:
        """Persist *recommendations* as-is, replacing any previous list."""

    @abstractmethod
    async def load_list(self) -> list[Recommendation] | None:
        """Return the stored list without past-dated entries.

        ``None`` when nothing is stored or the stored data is unreadable.
        """

    @abstractmethod
    async def clear(self) -> None:
        """Remove the stored list."""

    @abstractmethod
    async def save_profile(self, profile: AffinityProfile) -> None:
        """Persist the latest affinity profile."""

    @abstractmethod
    async def load_profile(self) -> AffinityProfile | None:
        """Return the stored profile, or ``None``."""

    @abstractmethod
    async def clear_profile(self) -> None:
        """Remove the stored profile."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier, e.g. ``"sqlite_store"``."""
