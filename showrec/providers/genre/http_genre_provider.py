"""HTTP adapter for the listing backend's artist-genre endpoint.

``GET {base_url}/api/artist-genre?artist=<name>`` returns
``{"artist", "genres": [...], "source", "mood"?, "energy"?}``.  The
``httpx.AsyncClient`` is injected so tests can use ``httpx.MockTransport``.
"""

from __future__ import annotations

import httpx

from showrec.interfaces.genre_provider import ArtistGenreInfo, IGenreProvider
from showrec.utils.errors import ProviderUnavailableError
from showrec.utils.logging import get_logger

_ENDPOINT = "/api/artist-genre"


class HttpGenreProvider(IGenreProvider):
    """Genre lookups against the listing backend."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._logger = get_logger(__name__)

    async def get_artist_genres(self, artist: str) -> ArtistGenreInfo:
        try:
            response = await self._http.get(
                f"{self._base_url}{_ENDPOINT}",
                params={"artist": artist},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            self._logger.warning("artist_genre_request_failed", artist=artist, error=str(exc))
            raise ProviderUnavailableError(
                message=f"Artist genre lookup failed for {artist!r}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise ProviderUnavailableError(
                message=f"Artist genre response was not JSON for {artist!r}",
                provider_name=self.get_provider_name(),
            ) from exc

        genres = data.get("genres") if isinstance(data, dict) else None
        if not isinstance(genres, list):
            return ArtistGenreInfo(artist=artist)

        energy = data.get("energy")
        return ArtistGenreInfo(
            artist=data.get("artist") or artist,
            genres=[str(g) for g in genres if g],
            source=data.get("source") or "musicbrainz",
            mood=data.get("mood"),
            energy=float(energy) if isinstance(energy, (int, float)) else None,
        )

    def get_provider_name(self) -> str:
        return "http_genre"
