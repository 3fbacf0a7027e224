"""Integration tests for the assembled recommendation engine.

Wires every real provider and service through ``build_all`` against an
in-process ``httpx.MockTransport`` backend and a temporary SQLite file.
"""

from __future__ import annotations

import importlib.util
import json
from datetime import date
from pathlib import Path
from typing import Any

import httpx
import pytest

from showrec.config.settings import Settings
from showrec.main import build_all, build_controller, build_score_model
from showrec.models.show import EventDay, Show
from showrec.providers.model.heuristic_score_model import HeuristicScoreModel
from showrec.providers.model.learned_score_model import LearnedScoreModel
from showrec.utils.errors import ConfigurationError

GENRES = {
    "Black Pumas": ["Soul", "Psychedelic Soul"],
    "Khruangbin": ["Psychedelic Rock", "Funk"],
    "Gary Clark Jr.": ["Blues", "Rock"],
}
VECTORS = {
    "Black Pumas": [1.0, 0.0, 0.0],
    "Khruangbin": [0.8, 0.6, 0.0],
    "Gary Clark Jr.": [0.0, 1.0, 0.0],
}

TORCH_INSTALLED = importlib.util.find_spec("torch") is not None


class FakeBackend:
    """Serves the two listing-backend routes and counts requests."""

    def __init__(self) -> None:
        self.genre_requests = 0
        self.embedding_requests = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/artist-genre":
            self.genre_requests += 1
            artist = request.url.params["artist"]
            if artist not in GENRES:
                return httpx.Response(404)
            return httpx.Response(200, json={"artist": artist, "genres": GENRES[artist]})

        if request.url.path == "/api/event-description-embeddings":
            self.embedding_requests += 1
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "embeddings": [
                        {**item, "embedding": VECTORS.get(item["artist"], [])}
                        for item in body["items"]
                    ]
                },
            )
        return httpx.Response(404)


@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def app_settings() -> Settings:
    return Settings(_env_file=None, api_base_url="https://listings.test", learned_model_seed=11)


@pytest.fixture()
def config(mock_config: dict[str, Any], tmp_path: Path) -> dict[str, Any]:
    mock_config["storage"]["recommendations_db_path"] = str(tmp_path / "recs.db")
    return mock_config


def _future_catalog() -> list[EventDay]:
    """Catalog dated relative to the real today so nothing is filtered as past."""
    today = date.today()
    day1 = date.fromordinal(today.toordinal() + 20)
    day2 = date.fromordinal(today.toordinal() + 22)
    return [
        EventDay(
            date=day1.isoformat(),
            shows=[
                Show(artist="Black Pumas", venue="Stubb's", time="9:00 pm"),
                Show(artist="Khruangbin", venue="Mohawk", time="8:00 pm"),
                Show(artist="Unknown Band", venue="Empty Bottle", time="1:00 am"),
            ],
        ),
        EventDay(
            date=day2.isoformat(),
            shows=[Show(artist="Khruangbin", venue="Scoot Inn", time="8:00 pm")],
        ),
    ]


class TestAssembly:
    @pytest.mark.skipif(not TORCH_INSTALLED, reason="PyTorch (showrec[ml]) not installed")
    def test_learned_model_selected_when_enabled(self, app_settings: Settings) -> None:
        assert isinstance(build_score_model(app_settings), LearnedScoreModel)

    def test_heuristic_when_disabled(self) -> None:
        s = Settings(_env_file=None, learned_model_enabled=False)
        assert isinstance(build_score_model(s), HeuristicScoreModel)

    def test_heuristic_when_torch_missing(
        self, app_settings: Settings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(LearnedScoreModel, "is_available", lambda self: False)
        assert isinstance(build_score_model(app_settings), HeuristicScoreModel)

    @pytest.mark.asyncio
    async def test_invalid_recommendation_config(self, app_settings: Settings, config: dict) -> None:
        config["recommendation"]["recompute_quiet_period_ms"] = 10
        async with httpx.AsyncClient() as client:
            with pytest.raises(ConfigurationError):
                build_all(app_settings, http_client=client, config=config)


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_single_pass(
        self,
        backend: FakeBackend,
        app_settings: Settings,
        config: dict,
        favorites: list[Show],
    ) -> None:
        async with httpx.AsyncClient(transport=httpx.MockTransport(backend)) as client:
            components = build_all(app_settings, http_client=client, config=config)
            service = components["recommendation_service"]
            await service.score_model.initialize()

            results = await service.compute_recommendations(_future_catalog(), favorites, locale="austin")

            assert [(r.show.artist, r.show.venue) for r in results] == [
                ("Black Pumas", "Stubb's"),
                ("Khruangbin", "Mohawk"),
                ("Khruangbin", "Scoot Inn"),
            ]
            pumas = results[0]
            assert pumas.components.rule_based == 70.0
            assert pumas.components.genre == pytest.approx(1.0)
            assert 0.5 < pumas.components.two_tower <= 1.0
            assert pumas.explanation.reasons[0] == "You've favorited Black Pumas 2 times"
            assert backend.embedding_requests == 1

            # Successful genre lookups and embeddings are cached across passes;
            # only the artist the backend does not know is asked for again.
            genre_requests = backend.genre_requests
            await service.compute_recommendations(_future_catalog(), favorites, locale="austin")
            assert backend.genre_requests == genre_requests + 1
            assert backend.embedding_requests == 2  # only the pair without data is retried

    @pytest.mark.asyncio
    async def test_controller_persists_and_trains(
        self,
        backend: FakeBackend,
        app_settings: Settings,
        config: dict,
    ) -> None:
        favorites = [
            Show(artist=artist, venue=venue, time="8:00 pm")
            for artist in GENRES
            for venue in ("Stubb's", "Mohawk", "Antone's", "Scoot Inn")
        ][:10]

        async with httpx.AsyncClient(transport=httpx.MockTransport(backend)) as client:
            components = build_all(app_settings, http_client=client, config=config)
            controller = build_controller(components, locale="austin", limit=5)
            await controller.start()
            assert controller.recommendations == []

            controller.notify_catalog_changed(_future_catalog())
            controller.notify_favorites_changed(favorites)
            await controller.wait_idle()

            assert 0 < len(controller.recommendations) <= 5
            model = components["score_model"]
            if TORCH_INSTALLED:
                assert isinstance(model, LearnedScoreModel)
                assert model.is_trained is True
            else:
                assert isinstance(model, HeuristicScoreModel)

            stored = await components["store"].load_list()
            assert stored == controller.recommendations
            profile = await components["store"].load_profile()
            assert profile.total_interactions == 10

            await controller.aclose()

        # A fresh controller serves the stored list before any recompute.
        async with httpx.AsyncClient(transport=httpx.MockTransport(backend)) as client:
            components = build_all(app_settings, http_client=client, config=config)
            restarted = build_controller(components, locale="austin", limit=5)
            await restarted.start()
            assert restarted.recommendations == stored
