"""Unit tests for GenreMatcher."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from showrec.interfaces.genre_provider import ArtistGenreInfo, IGenreProvider
from showrec.models.show import Show
from showrec.services.genre_matcher import GenreMatcher, normalize_genre
from showrec.utils.errors import ProviderUnavailableError


class TestBuildProfile:
    @pytest.mark.asyncio
    async def test_counts_normalised_genres_per_unique_artist(
        self, mock_genre_provider: MagicMock, favorites: list[Show]
    ) -> None:
        matcher = GenreMatcher(mock_genre_provider)
        profile = await matcher.build_profile(favorites)

        assert profile == {
            "soul": 1,
            "psychedelic soul": 1,
            "psychedelic rock": 1,
            "funk": 1,
            "blues": 1,
            "rock": 1,
        }
        # Black Pumas appears twice but is looked up once.
        assert mock_genre_provider.get_artist_genres.await_count == 3
        assert matcher.profile == profile

    @pytest.mark.asyncio
    async def test_uses_most_recent_artists(self, mock_genre_provider: MagicMock) -> None:
        favorites = [Show(artist=f"Old {i}", venue="V") for i in range(5)] + [
            Show(artist="Black Pumas", venue="V"),
            Show(artist="Khruangbin", venue="V"),
        ]
        matcher = GenreMatcher(mock_genre_provider, max_artists=2)
        await matcher.build_profile(favorites)

        looked_up = [call.args[0] for call in mock_genre_provider.get_artist_genres.await_args_list]
        assert looked_up == ["Khruangbin", "Black Pumas"]

    @pytest.mark.asyncio
    async def test_failed_lookups_are_skipped(self) -> None:
        async def _lookup(artist: str) -> ArtistGenreInfo:
            if artist == "Broken":
                raise ProviderUnavailableError("down", provider_name="mock_genre")
            return ArtistGenreInfo(artist=artist, genres=["House"])

        provider = MagicMock(spec=IGenreProvider)
        provider.get_artist_genres = AsyncMock(side_effect=_lookup)

        matcher = GenreMatcher(provider)
        profile = await matcher.build_profile(
            [Show(artist="Broken", venue="V"), Show(artist="Fine", venue="V")]
        )
        assert profile == {"house": 1}


class TestMatch:
    @pytest.mark.asyncio
    async def test_share_of_candidate_genres_in_profile(
        self, mock_genre_provider: MagicMock, favorites: list[Show]
    ) -> None:
        matcher = GenreMatcher(mock_genre_provider)
        await matcher.build_profile(favorites)

        assert matcher.match(["Soul", "Jazz"]) == pytest.approx(0.5)
        assert matcher.match([" FUNK ", "rock"]) == pytest.approx(1.0)
        assert matcher.match(["Jazz"]) == 0.0

    def test_no_data_scores_zero(self, mock_genre_provider: MagicMock) -> None:
        matcher = GenreMatcher(mock_genre_provider)
        assert matcher.match(["Soul"]) == 0.0
        assert matcher.match([]) == 0.0

    @pytest.mark.asyncio
    async def test_candidate_genres_degrade_to_empty(self) -> None:
        provider = MagicMock(spec=IGenreProvider)
        provider.get_artist_genres = AsyncMock(side_effect=ProviderUnavailableError("down"))
        matcher = GenreMatcher(provider)
        assert await matcher.candidate_genres("Anyone") == []

    def test_normalize_genre(self) -> None:
        assert normalize_genre("  Psychedelic Rock ") == "psychedelic rock"
