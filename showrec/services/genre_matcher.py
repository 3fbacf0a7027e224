"""Genre overlap between the user's favourite artists and a candidate.

The user's genre profile is built once per recommendation pass from the
most recently favourited unique artists.  Genre names are compared
trimmed and lower-cased.

``match`` returns 0 both when nothing overlaps and when either side has
no genre data at all; callers cannot tell those apart from the score.
"""

from __future__ import annotations

from collections import Counter

from showrec.interfaces.genre_provider import IGenreProvider
from showrec.models.show import Show
from showrec.utils.logging import get_logger

DEFAULT_MAX_ARTISTS = 20


def normalize_genre(genre: str) -> str:
    return genre.strip().lower()


class GenreMatcher:
    """Builds a genre profile and scores candidate genres against it."""

    def __init__(self, genre_provider: IGenreProvider, max_artists: int = DEFAULT_MAX_ARTISTS) -> None:
        self._genres = genre_provider
        self._max_artists = max_artists
        self._profile: dict[str, int] = {}
        self._logger = get_logger(__name__)

    @property
    def profile(self) -> dict[str, int]:
        """Genre -> number of profiled artists tagged with it."""
        return dict(self._profile)

    async def build_profile(self, favorites: list[Show]) -> dict[str, int]:
        """Count genres across the newest ``max_artists`` unique favourite artists.

        Favourites are ordered oldest first, so the list is walked from the
        end.  Artists whose lookup fails are skipped.
        """
        artists: list[str] = []
        for show in reversed(favorites):
            if show.artist not in artists:
                artists.append(show.artist)
            if len(artists) >= self._max_artists:
                break

        counts: Counter[str] = Counter()
        failures = 0
        for artist in artists:
            try:
                info = await self._genres.get_artist_genres(artist)
            except Exception as exc:
                failures += 1
                self._logger.debug("genre_profile_lookup_failed", artist=artist, error=str(exc))
                continue
            for genre in info.genres:
                name = normalize_genre(genre)
                if name:
                    counts[name] += 1

        self._profile = dict(counts)
        self._logger.info(
            "genre_profile_built",
            artists=len(artists),
            genres=len(self._profile),
            failed_lookups=failures,
        )
        return self.profile

    async def candidate_genres(self, artist: str) -> list[str]:
        """Genres for a candidate's artist; empty when the lookup fails."""
        try:
            info = await self._genres.get_artist_genres(artist)
        except Exception as exc:
            self._logger.debug("candidate_genre_lookup_failed", artist=artist, error=str(exc))
            return []
        return list(info.genres)

    def match(self, candidate_genres: list[str]) -> float:
        """Share of *candidate_genres* present in the profile, in [0, 1]."""
        if not candidate_genres or not self._profile:
            return 0.0
        matches = sum(1 for g in candidate_genres if normalize_genre(g) in self._profile)
        return matches / max(len(candidate_genres), 1)
