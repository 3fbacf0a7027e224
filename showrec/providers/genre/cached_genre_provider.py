"""Caching decorator around any :class:`IGenreProvider`.

Genre lookups are slow (MusicBrainz, then an LLM fallback on the backend)
and rarely change, so results are kept for a week under a normalised
artist key.  Failed lookups are not cached; the error reaches the caller.
"""

from __future__ import annotations

import re
from dataclasses import asdict

from showrec.interfaces.cache_provider import ICacheProvider
from showrec.interfaces.genre_provider import ArtistGenreInfo, IGenreProvider
from showrec.utils.logging import get_logger

_KEY_PREFIX = "artist_genre_"
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_artist_key(name: str) -> str:
    """``"  Black Pumas "`` -> ``"black_pumas"``."""
    return _WHITESPACE_RE.sub("_", name.strip().lower())


class CachedGenreProvider(IGenreProvider):
    """Serves genre lookups from *cache*, falling through to *inner*."""

    def __init__(
        self,
        inner: IGenreProvider,
        cache: ICacheProvider,
        ttl: int = 7 * 24 * 60 * 60,
    ) -> None:
        self._inner = inner
        self._cache = cache
        self._ttl = ttl
        self._logger = get_logger(__name__)

    async def get_artist_genres(self, artist: str) -> ArtistGenreInfo:
        key = _KEY_PREFIX + normalize_artist_key(artist)
        cached = await self._cache.get(key)
        if isinstance(cached, dict):
            return ArtistGenreInfo(**cached)

        info = await self._inner.get_artist_genres(artist)
        await self._cache.set(key, asdict(info), ttl=self._ttl)
        self._logger.debug("artist_genre_cached", artist=artist, genres=len(info.genres))
        return info

    def get_provider_name(self) -> str:
        return f"cached_{self._inner.get_provider_name()}"
