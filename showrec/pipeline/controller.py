"""Keeps the recommendation list in step with favourites and catalog changes.

# ─── CHANGE FLOW ──────────────────────────────────────────────────────
#
#   notify_favorites_changed ─┬─→ recompute scheduler (quiet 500ms)
#                             │       └─→ service.compute_recommendations
#                             │           → store.save_list / save_profile
#                             └─→ training scheduler (quiet 2000ms)
#                                     └─→ waits for recompute to go idle
#                                         → score_model.train(examples)
#   notify_catalog_changed ──────→ recompute scheduler
#
# Training is only requested once there are enough favourites and the
# count has grown enough since the last training pass.  Both schedulers
# coalesce bursts and never queue behind an in-flight run.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any

from showrec.config.recommendation import RecommendationConfig
from showrec.interfaces.recommendation_store import IRecommendationStore
from showrec.models.features import TrainingExample
from showrec.models.recommendation import Recommendation
from showrec.models.show import EventDay, Show
from showrec.pipeline.scheduler import CoalescingScheduler
from showrec.services.feature_encoder import FeatureEncoder
from showrec.services.profile_builder import AffinityProfileBuilder
from showrec.services.recommendation_service import (
    RecommendationService,
    is_recommended,
    lookup,
)
from showrec.utils.errors import ModelTrainingError
from showrec.utils.logging import get_logger


class RecommendationController:
    """Owns the current favourites, catalog and recommendation list.

    Parameters
    ----------
    service:
        The scoring engine.
    store:
        Persistence for the last list and profile.
    config:
        Gates, limits and quiet periods.
    locale:
        City used for description embeddings; blank disables them.
    """

    def __init__(
        self,
        service: RecommendationService,
        store: IRecommendationStore,
        config: RecommendationConfig | None = None,
        locale: str = "",
        limit: int | None = None,
        profile_builder: AffinityProfileBuilder | None = None,
        encoder: FeatureEncoder | None = None,
    ) -> None:
        self._service = service
        self._store = store
        self._config = config or RecommendationConfig()
        self._locale = locale
        self._limit = limit
        self._profiles = profile_builder or AffinityProfileBuilder()
        self._encoder = encoder or FeatureEncoder()

        self._favorites: list[Show] = []
        self._catalog: list[EventDay] = []
        self._recommendations: list[Recommendation] = []
        self._last_training_count = 0
        self._logger = get_logger(__name__)

        self._recompute = CoalescingScheduler(
            "recompute", self._config.recompute_quiet_period_ms, self._recompute_now
        )
        self._training = CoalescingScheduler(
            "training", self._config.training_quiet_period_ms, self._train_now
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Initialise collaborators and serve the stored list until the first pass."""
        await self._store.initialize()
        await self._service.score_model.initialize()
        stored = await self._store.load_list()
        if stored:
            self._recommendations = stored
        self._logger.info("controller_started", stored=len(stored or []))

    async def wait_idle(self) -> None:
        """Wait for pending and in-flight recompute and training runs."""
        await self._recompute.wait_idle()
        await self._training.wait_idle()

    async def aclose(self) -> None:
        await self._recompute.cancel()
        await self._training.cancel()
        self._service.score_model.dispose()

    # ------------------------------------------------------------------
    # Change notifications
    # ------------------------------------------------------------------

    def notify_favorites_changed(self, favorites: list[Show]) -> None:
        self._favorites = list(favorites)
        self._recompute.request()
        if self._training_due():
            self._training.request()

    def notify_catalog_changed(self, catalog: list[EventDay]) -> None:
        self._catalog = list(catalog)
        self._recompute.request()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def recommendations(self) -> list[Recommendation]:
        return list(self._recommendations)

    def is_recommended(self, show: Show) -> bool:
        return is_recommended(show, self._recommendations)

    def lookup(self, show: Show) -> Recommendation | None:
        return lookup(show, self._recommendations)

    async def clear(self) -> None:
        """Forget the current list and stored snapshots."""
        self._recommendations = []
        await self._store.clear()
        await self._store.clear_profile()

    # ------------------------------------------------------------------
    # Scheduled actions
    # ------------------------------------------------------------------

    def _training_due(self) -> bool:
        count = len(self._favorites)
        return (
            count >= self._config.training_min_favorites
            and abs(count - self._last_training_count) >= self._config.training_min_growth
        )

    async def _recompute_now(self, _payload: Any = None) -> None:
        favorites = list(self._favorites)
        catalog = list(self._catalog)

        if favorites:
            await self._store.save_profile(self._profiles.build(favorites))

        recommendations = await self._service.compute_recommendations(
            catalog,
            favorites,
            limit=self._limit,
            locale=self._locale,
        )
        self._recommendations = recommendations
        # Saved even when empty: the store always mirrors the latest pass.
        await self._store.save_list(recommendations)

    async def _train_now(self, _payload: Any = None) -> None:
        # Interactive work first.
        await self._recompute.wait_idle()
        if not self._training_due():
            return

        favorites = list(self._favorites)
        self._last_training_count = len(favorites)
        profile_features = self._encoder.profile_features(self._profiles.build(favorites))
        examples = [
            TrainingExample(
                profile=profile_features,
                candidate=self._encoder.candidate_features(show),
                label=1.0,
            )
            for show in favorites
        ]

        model = self._service.score_model
        try:
            trained = await model.train(examples)
        except ModelTrainingError as exc:
            self._logger.warning("model_training_failed", model=model.get_model_name(), error=str(exc))
            return
        self._logger.info(
            "model_training_finished",
            model=model.get_model_name(),
            examples=len(examples),
            trained=trained,
        )
