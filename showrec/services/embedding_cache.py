"""Bounded, TTL-checked store of description embeddings.

Keyed by ``show_key(artist, venue)``.  Holds at most ``max_entries``
vectors; inserting a new key at capacity first evicts the single entry
with the oldest insertion/refresh timestamp.  An entry older than the TTL
is purged by the read that finds it and reported as a miss.  Empty
vectors are never stored.

Writes only happen from the recommendation pass, so there is no locking.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from showrec.interfaces.embedding_provider import DescriptionEmbedding, ShowPair
from showrec.utils.logging import get_logger

DEFAULT_MAX_ENTRIES = 300
DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60


def show_key(artist: str | None, venue: str | None) -> str:
    """Composite cache key, e.g. ``"Black Pumas|Stubb's"``."""
    return f"{(artist or '').strip()}|{(venue or '').strip()}"


@dataclass
class CacheEntry:
    embedding: list[float]
    stored_at: float


class EmbeddingCache:
    """In-process embedding store with capacity and TTL bounds."""

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        timer: Callable[[], float] = time.time,
    ) -> None:
        self._max_entries = max_entries
        self._ttl = ttl_seconds
        self._timer = timer
        self._entries: dict[str, CacheEntry] = {}
        self._logger = get_logger(__name__)

    def get(self, artist: str, venue: str) -> list[float] | None:
        key = show_key(artist, venue)
        entry = self._entries.get(key)
        if entry is None or not entry.embedding:
            return None
        if self._timer() - entry.stored_at > self._ttl:
            del self._entries[key]
            self._logger.debug("embedding_cache_expired", key=key)
            return None
        return entry.embedding

    def set(self, artist: str, venue: str, embedding: list[float]) -> None:
        if not embedding:
            return
        key = show_key(artist, venue)
        if key not in self._entries and len(self._entries) >= self._max_entries:
            self.evict_oldest()
        self._entries[key] = CacheEntry(embedding=list(embedding), stored_at=self._timer())

    def evict_oldest(self) -> str | None:
        """Drop the entry with the smallest timestamp; return its key."""
        if not self._entries:
            return None
        oldest = min(self._entries, key=lambda k: self._entries[k].stored_at)
        del self._entries[oldest]
        self._logger.debug("embedding_cache_evicted", key=oldest)
        return oldest

    def get_many(self, pairs: Iterable[ShowPair]) -> dict[str, list[float]]:
        """Return cached vectors for *pairs*, keyed by :func:`show_key`."""
        found: dict[str, list[float]] = {}
        for pair in pairs:
            vector = self.get(pair.artist, pair.venue)
            if vector is not None:
                found[show_key(pair.artist, pair.venue)] = vector
        return found

    def set_many(self, items: Iterable[DescriptionEmbedding]) -> None:
        for item in items:
            self.set(item.artist, item.venue, item.embedding)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
