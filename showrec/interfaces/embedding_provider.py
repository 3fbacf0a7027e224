"""Abstract base class for show-description embedding providers.

The backend writes a short description of each (artist, venue) pair and
embeds it.  showrec only consumes the vectors.  Implementations are
called with at most ``embedding_batch_size`` items per request.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ShowPair:
    """The (artist, venue) pair a description embedding is keyed by."""

    artist: str
    venue: str


@dataclass(frozen=True)
class DescriptionEmbedding:
    """Embedding for one pair.  An empty vector means "no data"."""

    artist: str
    venue: str
    embedding: list[float] = field(default_factory=list)


class IEmbeddingProvider(ABC):
    """Contract for description embedding services."""

    @abstractmethod
    async def embed_descriptions(
        self,
        pairs: list[ShowPair],
        locale: str,
    ) -> list[DescriptionEmbedding]:
        """Return embeddings for *pairs* described in the context of *locale*.

        Results need not be positional; callers match them back by
        (artist, venue).  Pairs the backend cannot describe may be omitted
        or returned with an empty vector.

        Raises
        ------
        showrec.utils.errors.ProviderUnavailableError
            If the request fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier, e.g. ``"http_embedding"``."""
