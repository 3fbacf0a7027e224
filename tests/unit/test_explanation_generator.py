"""Unit tests for ExplanationGenerator and reason summaries."""

from __future__ import annotations

from datetime import date

import pytest

from showrec.models.profile import AffinityProfile
from showrec.models.show import Show
from showrec.services.explanation_generator import ExplanationGenerator, summarize_reasons
from showrec.services.profile_builder import AffinityProfileBuilder

TODAY = date(2026, 1, 20)


@pytest.fixture()
def generator() -> ExplanationGenerator:
    return ExplanationGenerator(today=lambda: TODAY)


@pytest.fixture()
def profile(favorites: list[Show]) -> AffinityProfile:
    return AffinityProfileBuilder().build(favorites)


class TestSummarizeReasons:
    def test_no_reasons(self) -> None:
        assert summarize_reasons([]) == "Similar to events you might enjoy"

    def test_one_reason(self) -> None:
        assert summarize_reasons(["A"]) == "A"

    def test_two_reasons(self) -> None:
        assert summarize_reasons(["A", "B"]) == "A and B"

    def test_three_reasons_singular(self) -> None:
        assert summarize_reasons(["A", "B", "C"]) == "A, B, and 1 more reason"

    def test_many_reasons_plural(self) -> None:
        assert summarize_reasons(["A", "B", "C", "D", "E"]) == "A, B, and 3 more reasons"


class TestGenerate:
    def test_every_signal_fires(self, generator: ExplanationGenerator, profile: AffinityProfile) -> None:
        show = Show(artist="Black Pumas", venue="Stubb's", time="9:00 pm")
        result = generator.generate(show, profile, 0.8, event_date="Thursday, January 22, 2026")

        assert result.reasons == [
            "You've favorited Black Pumas 2 times",
            "You've been to Stubb's 2 times",
            "Matches your evening preference",
            "Strong match based on your patterns",
            "Happening soon",
        ]
        assert result.explanation == (
            "You've favorited Black Pumas 2 times, You've been to Stubb's 2 times, and 3 more reasons"
        )
        # 40 + 30 + 20 + 6 + 10 points, capped.
        assert result.confidence == 1.0

    def test_partial_signals(self, generator: ExplanationGenerator, profile: AffinityProfile) -> None:
        show = Show(artist="Khruangbin", venue="Scoot Inn", time="8:00 pm")
        result = generator.generate(show, profile, 0.6, event_date="2026-01-30")

        assert result.explanation == "You've favorited Khruangbin before and Matches your evening preference"
        # 20 (artist) + 20 (time) + 2 (model 0.6)
        assert result.confidence == pytest.approx(0.42)

    def test_boosts_without_reasons_report_zero_confidence(
        self, generator: ExplanationGenerator, profile: AffinityProfile
    ) -> None:
        show = Show(artist="Unknown Band", venue="Empty Bottle", time="1:00 am")
        # Model 0.65 and an event 5 days out both add points but no reason.
        result = generator.generate(show, profile, 0.65, event_date="2026-01-25")

        assert result.reasons == []
        assert result.explanation == "Similar to events you might enjoy"
        assert result.confidence == 0.0

    def test_recency_points_scale_with_days(
        self, generator: ExplanationGenerator, profile: AffinityProfile
    ) -> None:
        show = Show(artist="Gary Clark Jr.", venue="Elsewhere", time="TBA")
        today_result = generator.generate(show, profile, 0.0, event_date="2026-01-20")
        later_result = generator.generate(show, profile, 0.0, event_date="2026-01-23")

        # 20 (artist) + 2 * (7 - days)
        assert today_result.confidence == pytest.approx(0.34)
        assert later_result.confidence == pytest.approx(0.28)
        assert "Happening soon" in today_result.reasons
        assert "Happening soon" in later_result.reasons

    def test_past_events_get_no_recency(
        self, generator: ExplanationGenerator, profile: AffinityProfile
    ) -> None:
        show = Show(artist="Gary Clark Jr.", venue="Elsewhere")
        result = generator.generate(show, profile, 0.0, event_date="2026-01-19")
        assert result.reasons == ["You've favorited Gary Clark Jr. before"]
        assert result.confidence == pytest.approx(0.20)

    def test_genre_overlap_adds_reason_but_no_points(
        self, generator: ExplanationGenerator, profile: AffinityProfile
    ) -> None:
        show = Show(artist="Black Pumas", venue="Elsewhere", time="TBA")
        without = generator.generate(show, profile, 0.0)
        with_genres = generator.generate(
            show,
            profile,
            0.0,
            genres=["Soul", "Jazz", "Psychedelic Soul", "Funk"],
            profile_genres={"soul": 1, "psychedelic soul": 1, "funk": 2},
        )

        assert "Similar genre: Soul, Psychedelic Soul" in with_genres.reasons
        assert with_genres.confidence == without.confidence

    def test_time_preference_needs_more_than_thirty_percent(
        self, generator: ExplanationGenerator
    ) -> None:
        profile = AffinityProfileBuilder().build(
            [Show(artist=f"A{i}", venue="V", time=t) for i, t in enumerate(
                ["9:00 am", "10:00 am", "8:00 pm", "2:00 pm", "3:00 pm", "4:00 pm", "1:00 pm",
                 "11:00 pm", "11:30 pm", "12:00 pm"]
            )]
        )
        # Evening holds 1 of 10 favourites.
        evening = generator.generate(Show(artist="X", venue="Y", time="7:00 pm"), profile, 0.0)
        assert evening.reasons == []
        # Afternoon holds 5 of 10.
        afternoon = generator.generate(Show(artist="X", venue="Y", time="2:30 pm"), profile, 0.0)
        assert afternoon.reasons == ["Matches your afternoon preference"]
        assert afternoon.confidence == pytest.approx(0.10)

    def test_confidence_always_within_bounds(
        self, generator: ExplanationGenerator, profile: AffinityProfile, favorites: list[Show]
    ) -> None:
        for show in favorites:
            for score in (0.0, 0.5, 0.99):
                result = generator.generate(show, profile, score, event_date="2026-01-21")
                assert 0.0 <= result.confidence <= 1.0
                if result.confidence > 0:
                    assert result.reasons
