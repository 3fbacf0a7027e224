"""Recommendation engine: blends every signal into a ranked, explained list.

Architecture overview
---------------------
For each catalog show that is not already a favourite:

  1. FEATURES + MODEL   -- profile and show features go through the score
                           model (learned network or heuristic), 0–1.
  2. GENRE              -- share of the show's genres the user likes, 0–1.
  3. RULE-BASED         -- min(artist_count*20, 40) + min(venue_count*15, 30),
                           0–70.
  4. TWO-TOWER          -- remapped cosine of description embeddings, 0–1.
  5. EXPLANATION        -- reasons + confidence from ExplanationGenerator.
  6. BLEND (0–100)      -- two_tower*100*w_tt + rule_based*w_rb
                           + genre*100*w_g + learned*100*w_l

A show is kept when its blended score clears ``keep_threshold`` or its
explanation has at least one reason.  The list is ordered by event date
(earliest first) and, within a date, by blended score (highest first),
then cut to the requested limit.

Every collaborator failure degrades its own component to 0; nothing here
raises to the caller.  Missing input (no favourites, no catalog, or fewer
than ``min_interactions`` favourites) yields an empty list.
"""

from __future__ import annotations

import time
from collections.abc import Iterable

from showrec.config.recommendation import RecommendationConfig
from showrec.interfaces.score_model import IScoreModel
from showrec.models.features import ProfileFeatures
from showrec.models.profile import AffinityProfile
from showrec.models.recommendation import ComponentScores, Recommendation
from showrec.models.show import EventDay, Show
from showrec.services.embedding_cache import show_key
from showrec.services.explanation_generator import ExplanationGenerator
from showrec.services.feature_encoder import FeatureEncoder
from showrec.services.genre_matcher import GenreMatcher
from showrec.services.profile_builder import AffinityProfileBuilder
from showrec.services.two_tower import TwoTowerScorer
from showrec.utils.datetime_helpers import event_sort_key
from showrec.utils.logging import get_logger


def rule_based_score(profile: AffinityProfile, show: Show) -> float:
    """Favourite-count score on a 0–70 scale."""
    artist_points = min(profile.artist_count(show.artist) * 20, 40)
    venue_points = min(profile.venue_count(show.venue) * 15, 30)
    return float(artist_points + venue_points)


def is_recommended(show: Show, recommendations: Iterable[Recommendation]) -> bool:
    """True if a recommendation exists for the same artist, venue and time."""
    return lookup(show, recommendations) is not None


def lookup(show: Show, recommendations: Iterable[Recommendation]) -> Recommendation | None:
    """Return the recommendation for *show* (matched on artist, venue, time)."""
    for rec in recommendations:
        if (
            rec.show.artist == show.artist
            and rec.show.venue == show.venue
            and rec.show.time == show.time
        ):
            return rec
    return None


class RecommendationService:
    """Computes ranked recommendations from a catalog and a favourites list.

    All collaborators are injected so tests can substitute deterministic
    stubs for the score model, genre lookups and embeddings.
    """

    def __init__(
        self,
        score_model: IScoreModel,
        genre_matcher: GenreMatcher,
        two_tower: TwoTowerScorer,
        explanation_generator: ExplanationGenerator | None = None,
        profile_builder: AffinityProfileBuilder | None = None,
        encoder: FeatureEncoder | None = None,
        config: RecommendationConfig | None = None,
    ) -> None:
        self._model = score_model
        self._genres = genre_matcher
        self._two_tower = two_tower
        self._explainer = explanation_generator or ExplanationGenerator()
        self._profiles = profile_builder or AffinityProfileBuilder()
        self._encoder = encoder or FeatureEncoder()
        self._config = config or RecommendationConfig()
        self._logger = get_logger(__name__)

    @property
    def score_model(self) -> IScoreModel:
        return self._model

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def compute_recommendations(
        self,
        catalog: list[EventDay],
        favorites: list[Show],
        limit: int | None = None,
        locale: str = "",
    ) -> list[Recommendation]:
        """Score every non-favourite show in *catalog* and return the top *limit*.

        Parameters
        ----------
        catalog:
            Days of listings, each with its shows.
        favorites:
            The user's favourited shows, oldest first.
        limit:
            Maximum number of results; defaults to ``config.default_limit``.
        locale:
            City the catalog belongs to.  Description embeddings are only
            fetched when this is non-blank.
        """
        limit = self._config.default_limit if limit is None else limit
        if not catalog or not favorites or limit <= 0:
            return []

        profile = self._profiles.build(favorites)
        if profile.total_interactions < self._config.min_interactions:
            self._logger.info(
                "recommendations_gated",
                interactions=profile.total_interactions,
                minimum=self._config.min_interactions,
            )
            return []

        started = time.monotonic()
        profile_features = self._encoder.profile_features(profile)
        profile_genres = await self._genres.build_profile(favorites)
        embedding_map, user_vector = await self._embeddings(catalog, favorites, locale)

        favorite_keys = {s.identity for s in favorites}
        genre_cache: dict[str, list[str]] = {}
        scored: list[Recommendation] = []
        candidates = 0

        for day in catalog:
            for show in day.shows:
                if show.identity in favorite_keys:
                    continue
                candidates += 1
                rec = await self._score_candidate(
                    show=show,
                    event_date=day.date,
                    profile=profile,
                    profile_features=profile_features,
                    profile_genres=profile_genres,
                    genre_cache=genre_cache,
                    item_vector=embedding_map.get(show_key(show.artist, show.venue)),
                    user_vector=user_vector,
                )
                if rec.score > self._config.keep_threshold or rec.explanation.reasons:
                    scored.append(rec)

        scored.sort(key=lambda r: (event_sort_key(r.event_date), -r.score))
        results = scored[:limit]

        self._logger.info(
            "recommendation_pass_complete",
            model=self._model.get_model_name(),
            candidates=candidates,
            kept=len(scored),
            returned=len(results),
            elapsed_ms=round((time.monotonic() - started) * 1000),
        )
        return results

    is_recommended = staticmethod(is_recommended)
    lookup = staticmethod(lookup)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _embeddings(
        self,
        catalog: list[EventDay],
        favorites: list[Show],
        locale: str,
    ) -> tuple[dict[str, list[float]], list[float]]:
        """Fetch description vectors for all shows; ``({}, [])`` when unavailable."""
        if not locale or not locale.strip():
            return {}, []
        shows = [show for day in catalog for show in day.shows] + list(favorites)
        try:
            embedding_map = await self._two_tower.fetch_embedding_map(shows, locale.strip())
        except Exception as exc:
            self._logger.warning("two_tower_embeddings_failed", error=str(exc))
            return {}, []
        return embedding_map, self._two_tower.user_vector(favorites, embedding_map)

    async def _candidate_genres(self, artist: str, cache: dict[str, list[str]]) -> list[str]:
        if artist not in cache:
            cache[artist] = await self._genres.candidate_genres(artist)
        return cache[artist]

    def _model_score(self, profile_features: ProfileFeatures, show: Show, event_date: str) -> float:
        try:
            candidate_features = self._encoder.candidate_features(show, event_date)
            value = float(self._model.score(profile_features, candidate_features))
        except Exception as exc:
            self._logger.warning("model_score_failed", artist=show.artist, error=str(exc))
            return 0.0
        return min(max(value, 0.0), 1.0)

    async def _score_candidate(
        self,
        *,
        show: Show,
        event_date: str,
        profile: AffinityProfile,
        profile_features: ProfileFeatures,
        profile_genres: dict[str, int],
        genre_cache: dict[str, list[str]],
        item_vector: list[float] | None,
        user_vector: list[float],
    ) -> Recommendation:
        learned = self._model_score(profile_features, show, event_date)

        genres = await self._candidate_genres(show.artist, genre_cache)
        genre = self._genres.match(genres)

        rule_based = rule_based_score(profile, show)
        two_tower = self._two_tower.score(user_vector, item_vector) if user_vector else 0.0

        explanation = self._explainer.generate(
            show,
            profile,
            learned,
            event_date=event_date,
            genres=genres if genre > 0 else None,
            profile_genres=profile_genres or None,
        )

        w = self._config.weights
        final = (
            two_tower * 100 * w.two_tower
            + rule_based * w.rule_based
            + genre * 100 * w.genre
            + learned * 100 * w.learned
        )
        return Recommendation(
            show=show,
            score=final,
            components=ComponentScores(
                rule_based=rule_based,
                learned=learned,
                genre=genre,
                two_tower=two_tower,
            ),
            explanation=explanation,
            event_date=event_date,
        )
