"""showrec application assembly.

Wires providers and services together via dependency injection.  Loads
configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging on import, like any other entry point would.

``build_all`` returns a flat dict of named components; ``build_controller``
is the usual way in for long-running callers, and ``run_recommendations``
is a one-shot helper for scripts and the CLI.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from showrec.config.loader import load_config
from showrec.config.recommendation import RecommendationConfig
from showrec.config.settings import Settings
from showrec.interfaces.score_model import IScoreModel
from showrec.models.recommendation import Recommendation
from showrec.models.show import EventDay, Show
from showrec.pipeline.controller import RecommendationController
from showrec.providers.cache.memory_cache import MemoryCacheProvider
from showrec.providers.embedding.http_embedding_provider import HttpEmbeddingProvider
from showrec.providers.genre.cached_genre_provider import CachedGenreProvider
from showrec.providers.genre.http_genre_provider import HttpGenreProvider
from showrec.providers.model.heuristic_score_model import HeuristicScoreModel
from showrec.providers.model.learned_score_model import LearnedScoreModel
from showrec.providers.store.sqlite_recommendation_store import SQLiteRecommendationStore
from showrec.services.embedding_cache import EmbeddingCache
from showrec.services.explanation_generator import ExplanationGenerator
from showrec.services.feature_encoder import FeatureEncoder
from showrec.services.genre_matcher import GenreMatcher
from showrec.services.profile_builder import AffinityProfileBuilder
from showrec.services.recommendation_service import RecommendationService
from showrec.services.two_tower import TwoTowerScorer
from showrec.utils.errors import ConfigurationError
from showrec.utils.logging import configure_logging

# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------

settings = Settings()
# The CLI configures its own stderr logging before importing this module.
if not structlog.is_configured():
    configure_logging(log_level=settings.log_level)
logger = structlog.get_logger(logger_name=__name__)


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def build_score_model(app_settings: Settings, encoder: FeatureEncoder | None = None) -> IScoreModel:
    """Pick the score model once, at assembly time.

    The learned network is used when enabled and its availability check
    passes; otherwise the heuristic.
    """
    encoder = encoder or FeatureEncoder()
    heuristic = HeuristicScoreModel()
    if not app_settings.learned_model_enabled:
        return heuristic

    learned = LearnedScoreModel(
        encoder=encoder,
        fallback=heuristic,
        seed=app_settings.learned_model_seed,
    )
    if learned.is_available():
        return learned

    logger.warning("learned_model_unavailable_using_heuristic")
    return heuristic


def build_recommendation_config(config: dict[str, Any]) -> RecommendationConfig:
    """Validate the ``recommendation`` section of the loaded config."""
    try:
        return RecommendationConfig.from_mapping(config.get("recommendation"))
    except ValidationError as exc:
        raise ConfigurationError(message=f"Invalid recommendation config: {exc}") from exc


# ---------------------------------------------------------------------------
# Full DI assembly
# ---------------------------------------------------------------------------


def build_all(
    app_settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
    config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance.

    Returns a flat dict of named components.  The caller owns
    ``http_client`` and must close it.
    """
    s = app_settings or settings
    if config is None:
        config = load_config(s.config_path, settings=s)
    rec_config = build_recommendation_config(config)

    base_url = config.get("api", {}).get("base_url", s.api_base_url)
    http_client = http_client or httpx.AsyncClient(timeout=s.http_timeout)

    # -- Genre lookups (cached for a week) --
    genre_cache = MemoryCacheProvider(ttl=rec_config.genre_cache_ttl_seconds)
    genre_provider = CachedGenreProvider(
        inner=HttpGenreProvider(http_client=http_client, base_url=base_url),
        cache=genre_cache,
        ttl=rec_config.genre_cache_ttl_seconds,
    )
    genre_matcher = GenreMatcher(genre_provider, max_artists=rec_config.genre_profile_max_artists)

    # -- Description embeddings --
    embedding_cache = EmbeddingCache(
        max_entries=rec_config.embedding_cache_max_entries,
        ttl_seconds=rec_config.embedding_cache_ttl_seconds,
    )
    two_tower = TwoTowerScorer(
        embedding_provider=HttpEmbeddingProvider(http_client=http_client, base_url=base_url),
        cache=embedding_cache,
        batch_size=rec_config.embedding_batch_size,
    )

    # -- Scoring --
    encoder = FeatureEncoder()
    profile_builder = AffinityProfileBuilder()
    score_model = build_score_model(s, encoder=encoder)
    service = RecommendationService(
        score_model=score_model,
        genre_matcher=genre_matcher,
        two_tower=two_tower,
        explanation_generator=ExplanationGenerator(),
        profile_builder=profile_builder,
        encoder=encoder,
        config=rec_config,
    )

    store = SQLiteRecommendationStore(
        db_path=config.get("storage", {}).get("recommendations_db_path", s.recommendations_db_path)
    )

    logger.info(
        "showrec_assembled",
        score_model=score_model.get_model_name(),
        genre_provider=genre_provider.get_provider_name(),
        store=store.get_provider_name(),
    )

    return {
        "http_client": http_client,
        "config": rec_config,
        "genre_cache": genre_cache,
        "genre_provider": genre_provider,
        "genre_matcher": genre_matcher,
        "embedding_cache": embedding_cache,
        "two_tower": two_tower,
        "encoder": encoder,
        "profile_builder": profile_builder,
        "score_model": score_model,
        "recommendation_service": service,
        "store": store,
    }


def build_controller(
    components: dict[str, Any],
    locale: str = "",
    limit: int | None = None,
) -> RecommendationController:
    """Wrap assembled components in a change-driven controller."""
    return RecommendationController(
        service=components["recommendation_service"],
        store=components["store"],
        config=components["config"],
        locale=locale,
        limit=limit,
        profile_builder=components["profile_builder"],
        encoder=components["encoder"],
    )


async def run_recommendations(
    catalog: list[EventDay],
    favorites: list[Show],
    limit: int | None = None,
    locale: str = "",
    custom_settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> list[Recommendation]:
    """One-shot convenience: assemble, compute once, close the HTTP client."""
    owns_client = http_client is None
    components = build_all(custom_settings, http_client=http_client)
    service: RecommendationService = components["recommendation_service"]
    try:
        await service.score_model.initialize()
        return await service.compute_recommendations(catalog, favorites, limit=limit, locale=locale)
    finally:
        if owns_client:
            await components["http_client"].aclose()
