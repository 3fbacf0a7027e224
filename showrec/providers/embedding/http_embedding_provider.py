"""HTTP adapter for the backend's description-embedding endpoint.

``POST {base_url}/api/event-description-embeddings`` with
``{"city": <locale>, "items": [{"artist", "venue"}, ...]}`` returns
``{"embeddings": [{"artist", "venue", "embedding": [...]}, ...]}``.
The backend rate-limits this route, so callers keep batches small.
"""

from __future__ import annotations

import httpx

from showrec.interfaces.embedding_provider import (
    DescriptionEmbedding,
    IEmbeddingProvider,
    ShowPair,
)
from showrec.utils.errors import ProviderUnavailableError
from showrec.utils.logging import get_logger

_ENDPOINT = "/api/event-description-embeddings"


class HttpEmbeddingProvider(IEmbeddingProvider):
    """Description embeddings fetched from the listing backend."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._logger = get_logger(__name__)

    async def embed_descriptions(
        self,
        pairs: list[ShowPair],
        locale: str,
    ) -> list[DescriptionEmbedding]:
        if not pairs:
            return []

        payload = {
            "city": locale,
            "items": [{"artist": p.artist, "venue": p.venue} for p in pairs],
        }
        try:
            response = await self._http.post(f"{self._base_url}{_ENDPOINT}", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            self._logger.warning(
                "description_embedding_request_failed",
                batch_size=len(pairs),
                error=str(exc),
            )
            raise ProviderUnavailableError(
                message=f"Description embedding request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise ProviderUnavailableError(
                message="Description embedding response was not JSON",
                provider_name=self.get_provider_name(),
            ) from exc

        rows = data.get("embeddings") if isinstance(data, dict) else None
        results: list[DescriptionEmbedding] = []
        for row in rows or []:
            if not isinstance(row, dict):
                continue
            try:
                vector = [float(x) for x in row.get("embedding") or []]
            except (TypeError, ValueError):
                self._logger.debug("description_embedding_row_malformed", artist=row.get("artist"))
                continue
            results.append(
                DescriptionEmbedding(
                    artist=str(row.get("artist", "")),
                    venue=str(row.get("venue", "")),
                    embedding=vector,
                )
            )
        self._logger.debug(
            "description_embeddings_received",
            requested=len(pairs),
            received=len(results),
        )
        return results

    def get_provider_name(self) -> str:
        return "http_embedding"
