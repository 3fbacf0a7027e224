"""Two-tower similarity between a user and each candidate show.

User tower: the mean of the description embeddings of every favourited
(artist, venue) pair we have a vector for.  Item tower: the candidate's own
description embedding.  The score is the cosine similarity remapped from
[-1, 1] to [0, 1], and exactly 0 whenever the comparison is undefined
(empty vector, dimension mismatch, zero norm).

Embeddings come from the backend in batches of at most ``batch_size``
distinct pairs; only pairs missing from (or expired in) the cache are
requested, and whatever comes back is written to the cache.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import numpy as np

from showrec.interfaces.embedding_provider import (
    DescriptionEmbedding,
    IEmbeddingProvider,
    ShowPair,
)
from showrec.models.show import Show
from showrec.services.embedding_cache import EmbeddingCache, show_key
from showrec.utils.logging import get_logger

DEFAULT_BATCH_SIZE = 30


def mean_vector(vectors: Sequence[Sequence[float]]) -> list[float]:
    """Element-wise mean; vectors whose length differs from the first are skipped."""
    if not vectors:
        return []
    dim = len(vectors[0])
    usable = [v for v in vectors if len(v) == dim]
    if dim == 0 or not usable:
        return []
    return np.mean(np.asarray(usable, dtype=np.float64), axis=0).tolist()


def _comparable(a: Sequence[float], b: Sequence[float]) -> tuple[np.ndarray, np.ndarray, float] | None:
    if not len(a) or not len(b) or len(a) != len(b):
        return None
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if not math.isfinite(denom) or denom <= 0.0:
        return None
    return va, vb, denom


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity in [-1, 1]; 0 when either vector is empty, zero, or mismatched."""
    parts = _comparable(a, b)
    if parts is None:
        return 0.0
    va, vb, denom = parts
    cos = float(np.dot(va, vb)) / denom
    if not math.isfinite(cos):
        return 0.0
    return max(-1.0, min(1.0, cos))


def cosine_to_zero_one(cos: float) -> float:
    """Map cosine from [-1, 1] onto [0, 1]."""
    return max(0.0, (cos + 1.0) / 2.0)


def two_tower_score(user_vector: Sequence[float], item_vector: Sequence[float]) -> float:
    """Remapped cosine, or exactly 0 when the comparison is undefined."""
    if _comparable(user_vector, item_vector) is None:
        return 0.0
    return cosine_to_zero_one(cosine_similarity(user_vector, item_vector))


class TwoTowerScorer:
    """Fetches description embeddings and scores candidates against the user."""

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        cache: EmbeddingCache,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self._provider = embedding_provider
        self._cache = cache
        self._batch_size = max(1, batch_size)
        self._logger = get_logger(__name__)

    async def fetch_embedding_map(
        self,
        shows: Iterable[Show],
        locale: str,
    ) -> dict[str, list[float]]:
        """Return ``show_key -> vector`` for every pair we could resolve.

        A failed batch is logged and skipped; the remaining batches still run.
        """
        unique: list[ShowPair] = []
        seen: set[str] = set()
        for show in shows:
            key = show_key(show.artist, show.venue)
            if key in seen:
                continue
            seen.add(key)
            unique.append(ShowPair(artist=show.artist, venue=show.venue))

        embedding_map = self._cache.get_many(unique)
        missing = [p for p in unique if show_key(p.artist, p.venue) not in embedding_map]

        to_cache: list[DescriptionEmbedding] = []
        failed_batches = 0
        for start in range(0, len(missing), self._batch_size):
            chunk = missing[start:start + self._batch_size]
            try:
                results = await self._provider.embed_descriptions(chunk, locale)
            except Exception as exc:
                failed_batches += 1
                self._logger.warning(
                    "embedding_batch_failed",
                    batch_start=start,
                    batch_size=len(chunk),
                    error=str(exc),
                )
                continue
            for item in results:
                if item.embedding:
                    embedding_map[show_key(item.artist, item.venue)] = item.embedding
                    to_cache.append(item)

        self._cache.set_many(to_cache)

        self._logger.info(
            "embedding_map_ready",
            pairs=len(unique),
            cached=len(unique) - len(missing),
            fetched=len(to_cache),
            failed_batches=failed_batches,
        )
        return embedding_map

    @staticmethod
    def user_vector(favorites: Iterable[Show], embedding_map: dict[str, list[float]]) -> list[float]:
        vectors = [
            embedding_map[key]
            for key in (show_key(s.artist, s.venue) for s in favorites)
            if embedding_map.get(key)
        ]
        return mean_vector(vectors)

    @staticmethod
    def score(user_vector: Sequence[float], item_vector: Sequence[float] | None) -> float:
        return two_tower_score(user_vector, item_vector or [])
