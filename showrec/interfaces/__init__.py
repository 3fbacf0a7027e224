"""Interface definitions for every collaborator showrec talks to.

Concrete adapters live in ``showrec/providers/`` and are wired together in
``showrec/main.py``.  Tests inject mocks built with ``MagicMock(spec=...)``.

    Interface              →  Concrete implementations
    ───────────────────────────────────────────────────────────
    ICacheProvider         →  MemoryCacheProvider
    IGenreProvider         →  HttpGenreProvider, CachedGenreProvider
    IEmbeddingProvider     →  HttpEmbeddingProvider
    IScoreModel            →  LearnedScoreModel, HeuristicScoreModel
    IRecommendationStore   →  SQLiteRecommendationStore
"""

from showrec.interfaces.cache_provider import ICacheProvider
from showrec.interfaces.embedding_provider import (
    DescriptionEmbedding,
    IEmbeddingProvider,
    ShowPair,
)
from showrec.interfaces.genre_provider import ArtistGenreInfo, IGenreProvider
from showrec.interfaces.recommendation_store import IRecommendationStore
from showrec.interfaces.score_model import IScoreModel

__all__ = [
    "ArtistGenreInfo",
    "DescriptionEmbedding",
    "ICacheProvider",
    "IEmbeddingProvider",
    "IGenreProvider",
    "IRecommendationStore",
    "IScoreModel",
    "ShowPair",
]
