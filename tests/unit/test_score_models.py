"""Unit tests for the heuristic and learned score models."""

from __future__ import annotations

import importlib.util
import math
from unittest.mock import patch

import pytest

from showrec.models.features import CandidateFeatures, ProfileFeatures, TrainingExample
from showrec.models.show import Show
from showrec.providers.model.heuristic_score_model import HeuristicScoreModel
from showrec.providers.model.learned_score_model import LearnedScoreModel
from showrec.services.feature_encoder import FeatureEncoder
from showrec.services.profile_builder import AffinityProfileBuilder
from showrec.utils.errors import ModelTrainingError

requires_torch = pytest.mark.skipif(
    importlib.util.find_spec("torch") is None, reason="PyTorch (showrec[ml]) not installed"
)


def _squash(total: float) -> float:
    return 1.0 / (1.0 + math.exp(-(total - 0.5) * 4))


def _examples(count: int) -> list[TrainingExample]:
    encoder = FeatureEncoder()
    shows = [
        Show(artist=f"Artist {i % 4}", venue=f"Venue {i % 3}", time=f"{7 + i % 4}:00 pm")
        for i in range(count)
    ]
    pf = encoder.profile_features(AffinityProfileBuilder().build(shows))
    return [TrainingExample(profile=pf, candidate=encoder.candidate_features(s)) for s in shows]


# ======================================================================
# HeuristicScoreModel
# ======================================================================


class TestHeuristicScoreModel:
    @pytest.fixture()
    def model(self) -> HeuristicScoreModel:
        return HeuristicScoreModel()

    def test_weighted_sum_through_sigmoid(self, model: HeuristicScoreModel) -> None:
        pf = ProfileFeatures(
            favorite_artists=[2.0, 1.0],
            favorite_venues=[2.0],
            time_preferences=[0.0, 0.0, 4.0, 0.0],
        )
        cf = CandidateFeatures(time_of_day=2, has_event_link=1)
        # 0.2*0.4 + 0.2*0.3 + 1.0*0.2 + 0.03 + 0.05
        assert model.score(pf, cf) == pytest.approx(_squash(0.42))

    def test_affinity_saturates_at_ten(self, model: HeuristicScoreModel) -> None:
        pf = ProfileFeatures(favorite_artists=[50.0], favorite_venues=[50.0])
        cf = CandidateFeatures(has_event_link=1, has_map_link=1)
        assert model.score(pf, cf) == pytest.approx(_squash(0.4 + 0.3 + 0.03 + 0.02 + 0.05))

    def test_empty_features_score_base_only(self, model: HeuristicScoreModel) -> None:
        score = model.score(ProfileFeatures(), CandidateFeatures())
        assert score == pytest.approx(_squash(0.05))

    def test_malformed_features_do_not_raise(self, model: HeuristicScoreModel) -> None:
        pf = ProfileFeatures(favorite_artists=None, time_preferences=["x", None, 1, 1])  # type: ignore[arg-type]
        cf = CandidateFeatures(time_of_day="evening", has_event_link="yes")  # type: ignore[arg-type]
        score = model.score(pf, cf)
        assert 0.0 <= score <= 1.0

    @pytest.mark.asyncio
    async def test_train_is_a_noop(self, model: HeuristicScoreModel) -> None:
        assert await model.train(_examples(12)) is False
        assert model.get_model_name() == "heuristic"
        assert model.is_available() is True


# ======================================================================
# LearnedScoreModel
# ======================================================================


@requires_torch
class TestLearnedScoreModel:
    @pytest.fixture()
    def model(self) -> LearnedScoreModel:
        return LearnedScoreModel(seed=7, epochs=3)

    def test_is_available(self, model: LearnedScoreModel) -> None:
        assert model.is_available() is True

    @pytest.mark.asyncio
    async def test_untrained_model_uses_fallback(self, model: LearnedScoreModel) -> None:
        await model.initialize()
        example = _examples(1)[0]
        expected = HeuristicScoreModel().score(example.profile, example.candidate)
        assert model.score(example.profile, example.candidate) == pytest.approx(expected)

    @pytest.mark.asyncio
    async def test_too_few_examples_skips_training(self, model: LearnedScoreModel) -> None:
        assert await model.train(_examples(9)) is False
        assert model.is_trained is False

    @pytest.mark.asyncio
    async def test_training_switches_to_network(self, model: LearnedScoreModel) -> None:
        examples = _examples(15)
        assert await model.train(examples) is True
        assert model.is_trained is True

        score = model.score(examples[0].profile, examples[0].candidate)
        assert 0.0 <= score <= 1.0
        assert math.isfinite(score)

    @pytest.mark.asyncio
    async def test_same_seed_same_scores(self) -> None:
        examples = _examples(15)
        first = LearnedScoreModel(seed=3, epochs=2)
        second = LearnedScoreModel(seed=3, epochs=2)
        await first.train(examples)
        await second.train(examples)
        ex = examples[4]
        assert first.score(ex.profile, ex.candidate) == pytest.approx(
            second.score(ex.profile, ex.candidate)
        )

    @pytest.mark.asyncio
    async def test_failed_fit_keeps_previous_state(self, model: LearnedScoreModel) -> None:
        import torch

        await model.initialize()
        before = model.state_dict()

        with patch.object(LearnedScoreModel, "_fit", side_effect=RuntimeError("nan")):
            with pytest.raises(ModelTrainingError) as exc_info:
                await model.train(_examples(12))

        assert exc_info.value.provider_name == "learned_mlp"
        assert model.is_trained is False
        after = model.state_dict()
        assert after.keys() == before.keys()
        for key, value in before.items():
            assert torch.equal(after[key], value)

    @pytest.mark.asyncio
    async def test_training_replaces_network_weights(
        self, model: LearnedScoreModel
    ) -> None:
        import torch

        await model.initialize()
        before = model.state_dict()
        await model.train(_examples(12))
        after = model.state_dict()
        assert any(not torch.equal(after[k], before[k]) for k in before)

    @pytest.mark.asyncio
    async def test_dispose_resets_to_fallback(self, model: LearnedScoreModel) -> None:
        examples = _examples(12)
        await model.train(examples)
        model.dispose()
        assert model.is_trained is False
        assert model.state_dict() == {}
        expected = HeuristicScoreModel().score(examples[0].profile, examples[0].candidate)
        assert model.score(examples[0].profile, examples[0].candidate) == pytest.approx(expected)


def test_learned_model_unavailable_without_torch(monkeypatch: pytest.MonkeyPatch) -> None:
    import builtins

    real_import = builtins.__import__

    def fake_import(name: str, *args, **kwargs):  # noqa: ANN202
        if name == "torch" or name.startswith("torch."):
            raise ImportError("No module named 'torch'")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    assert LearnedScoreModel().is_available() is False
