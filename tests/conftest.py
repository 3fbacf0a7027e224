"""Shared pytest fixtures for the showrec test suite."""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from showrec.interfaces.embedding_provider import (
    DescriptionEmbedding,
    IEmbeddingProvider,
    ShowPair,
)
from showrec.interfaces.genre_provider import ArtistGenreInfo, IGenreProvider
from showrec.models.show import EventDay, Show

# A Saturday, far enough before the catalog days that no recency boost applies.
FIXED_TODAY = date(2026, 1, 10)
FIXED_NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Paths and config
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Return a minimal resolved configuration for testing."""
    return {
        "app": {"env": "test"},
        "api": {"base_url": "https://listings.test", "timeout": 5.0},
        "storage": {"recommendations_db_path": "unused.db"},
        "recommendation": {
            "min_interactions": 3,
            "default_limit": 10,
            "keep_threshold": 20.0,
            "weights": {"two_tower": 0.35, "rule_based": 0.5, "genre": 0.2, "learned": 0.10},
        },
        "logging": {"level": "WARNING"},
    }


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixed_today() -> date:
    return FIXED_TODAY


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def favorites() -> list[Show]:
    """Four favourites, oldest first.  Black Pumas and Stubb's appear twice."""
    return [
        Show(artist="Black Pumas", venue="Stubb's", time="8:00 pm", event_date="Friday, January 2, 2026"),
        Show(artist="Black Pumas", venue="Mohawk", time="9:00 pm", event_date="Saturday, January 3, 2026"),
        Show(artist="Khruangbin", venue="Stubb's", time="7:30 pm", event_date="Saturday, January 3, 2026"),
        Show(artist="Gary Clark Jr.", venue="Antone's", time="9:30 pm"),
    ]


@pytest.fixture
def catalog() -> list[EventDay]:
    """Two listing days.  The second day repeats one favourite verbatim."""
    return [
        EventDay(
            date="Thursday, January 22, 2026",
            shows=[
                Show(artist="Khruangbin", venue="Mohawk", time="8:00 pm"),
                Show(artist="Black Pumas", venue="Stubb's", time="9:00 pm", eventLink="https://t.test/1"),
                Show(artist="Unknown Band", venue="Empty Bottle", time="1:00 am"),
            ],
        ),
        EventDay(
            date="Saturday, January 24, 2026",
            shows=[
                Show(artist="Khruangbin", venue="Scoot Inn", time="8:00 pm"),
                Show(artist="Khruangbin", venue="Stubb's", time="7:30 pm"),
            ],
        ),
    ]


# ---------------------------------------------------------------------------
# Provider mocks
# ---------------------------------------------------------------------------


GENRES: dict[str, list[str]] = {
    "Black Pumas": ["Soul", "Psychedelic Soul"],
    "Khruangbin": ["Psychedelic Rock", "Funk"],
    "Gary Clark Jr.": ["Blues", "Rock"],
    "Unknown Band": [],
}


@pytest.fixture
def mock_genre_provider() -> MagicMock:
    """IGenreProvider answering from :data:`GENRES`."""

    async def _lookup(artist: str) -> ArtistGenreInfo:
        return ArtistGenreInfo(artist=artist, genres=list(GENRES.get(artist, [])))

    provider = MagicMock(spec=IGenreProvider)
    provider.get_artist_genres = AsyncMock(side_effect=_lookup)
    provider.get_provider_name.return_value = "mock_genre"
    return provider


@pytest.fixture
def mock_embedding_provider() -> MagicMock:
    """IEmbeddingProvider returning a fixed 3-d vector per artist."""
    vectors = {
        "Black Pumas": [1.0, 0.0, 0.0],
        "Khruangbin": [0.8, 0.6, 0.0],
        "Gary Clark Jr.": [0.0, 1.0, 0.0],
    }

    async def _embed(pairs: list[ShowPair], locale: str) -> list[DescriptionEmbedding]:
        return [
            DescriptionEmbedding(artist=p.artist, venue=p.venue, embedding=vectors.get(p.artist, []))
            for p in pairs
        ]

    provider = MagicMock(spec=IEmbeddingProvider)
    provider.embed_descriptions = AsyncMock(side_effect=_embed)
    provider.get_provider_name.return_value = "mock_embedding"
    return provider
