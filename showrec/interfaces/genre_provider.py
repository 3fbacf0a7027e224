"""Abstract base class for artist genre lookup providers.

The listing backend resolves genres (MusicBrainz first, LLM fallback) and
caches them server-side; showrec only needs ``artist -> genres``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ArtistGenreInfo:
    """Genre lookup result for one artist."""

    artist: str
    genres: list[str] = field(default_factory=list)
    # "musicbrainz" or "gemini" depending on which backend resolved it.
    source: str = "musicbrainz"
    mood: str | None = None
    energy: float | None = None


class IGenreProvider(ABC):
    """Contract for artist genre lookups."""

    @abstractmethod
    async def get_artist_genres(self, artist: str) -> ArtistGenreInfo:
        """Return genre information for *artist*.

        Raises
        ------
        showrec.utils.errors.ProviderUnavailableError
            If the backend cannot be reached.  An artist with no known
            genres is not an error: it returns an empty ``genres`` list.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier, e.g. ``"http_genre"``."""
