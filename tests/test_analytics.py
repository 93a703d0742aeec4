"""Tests for the analytics package: tracker, A/B statistics and CLI."""

import pytest

from analytics.main import main as analytics_main
from analytics.models import Interaction, VariantStats
from analytics.stats import calculate_stats, determine_winner
from analytics.tracker import AnalyticsTracker
from common.exceptions import RAGError


def _make_interactions(n: int, variant: str = "A", rating=None, response_time_ms: int = 500) -> list[Interaction]:
    return [
        Interaction(
            id=f"interaction_{variant}_{i}",
            variant=variant,
            user_message="What is lidar?",
            bot_response="Lidar measures distance.",
            response_time_ms=response_time_ms,
            user_rating=rating,
        )
        for i in range(n)
    ]


class TestCalculateStats:
    def test_empty(self):
        stats = calculate_stats([], "A")
        assert stats.sample_size == 0
        assert stats.avg_rating is None
        assert stats.avg_response_time_ms is None

    def test_averages(self):
        interactions = _make_interactions(2, rating=4) + _make_interactions(1, rating=None, response_time_ms=800)
        stats = calculate_stats(interactions, "A")
        assert stats.sample_size == 3
        assert stats.ratings == [4, 4]
        assert stats.avg_rating == 4.0
        assert stats.avg_response_time_ms == 600


class TestDetermineWinner:
    def test_not_enough_data(self):
        a = calculate_stats(_make_interactions(9, "A", rating=5), "A")
        b = calculate_stats(_make_interactions(20, "B", rating=1), "B")
        decision = determine_winner(a, b)
        assert decision.winner is None
        assert "Not enough data" in decision.reason

    def test_rating_wins(self):
        a = calculate_stats(_make_interactions(10, "A", rating=3), "A")
        b = calculate_stats(_make_interactions(10, "B", rating=5), "B")
        decision = determine_winner(a, b)
        assert decision.winner == "B"
        assert decision.metric == "avg_rating"
        assert decision.difference == 2.0
        assert decision.confidence == "Medium"

    def test_response_time_when_no_ratings(self):
        a = calculate_stats(_make_interactions(30, "A", response_time_ms=300), "A")
        b = calculate_stats(_make_interactions(30, "B", response_time_ms=900), "B")
        decision = determine_winner(a, b)
        assert decision.winner == "A"
        assert decision.metric == "avg_response_time_ms"
        assert decision.confidence == "High"

    def test_zero_response_time_is_compared(self):
        a = calculate_stats(_make_interactions(10, "A", response_time_ms=0), "A")
        b = calculate_stats(_make_interactions(10, "B", response_time_ms=400), "B")
        decision = determine_winner(a, b)
        assert decision.winner == "A"
        assert decision.difference == 400.0

    def test_zero_response_time_tie(self):
        a = calculate_stats(_make_interactions(10, "A", response_time_ms=0), "A")
        b = calculate_stats(_make_interactions(10, "B", response_time_ms=0), "B")
        decision = determine_winner(a, b)
        assert decision.winner is None
        assert decision.reason == "Tie on response time"

    def test_no_comparable_metrics(self):
        a = VariantStats(variant="A", sample_size=10)
        b = VariantStats(variant="B", sample_size=10)
        assert determine_winner(a, b).reason == "No comparable metrics"


class TestAnalyticsTracker:
    def test_track_and_rate(self, tmp_path):
        tracker = AnalyticsTracker(tmp_path / "analytics.json")
        interaction_id = tracker.track_interaction("What is lidar?", "Lasers.", [{"label": "x"}], 250, "B", "exp_1")

        assert tracker.rate_interaction(interaction_id, 5)
        interaction = tracker.load().interactions[0]
        assert interaction.user_rating == 5
        assert interaction.variant == "B"
        assert interaction.experiment_id == "exp_1"

    def test_rate_unknown(self, tmp_path):
        assert not AnalyticsTracker(tmp_path / "analytics.json").rate_interaction("nope", 3)

    def test_rate_out_of_range(self, tmp_path):
        with pytest.raises(ValueError):
            AnalyticsTracker(tmp_path / "analytics.json").rate_interaction("nope", 0)

    def test_experiment_results(self, tmp_path):
        tracker = AnalyticsTracker(tmp_path / "analytics.json")
        exp_id = tracker.create_experiment("Prompt wording", variant_a="short", variant_b="long")
        for variant, rating in (("A", 2), ("B", 4)):
            for _ in range(10):
                iid = tracker.track_interaction("q", "a", [], 100, variant, exp_id)
                tracker.rate_interaction(iid, rating)
        tracker.track_interaction("q", "a", [], 100, "A", None)

        results = tracker.get_experiment_results(exp_id)
        assert results.experiment == "Prompt wording"
        assert results.variant_a.sample_size == 10
        assert results.winner.winner == "B"

    def test_unknown_experiment(self, tmp_path):
        assert AnalyticsTracker(tmp_path / "analytics.json").get_experiment_results("exp_x") is None

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "analytics.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(RAGError):
            AnalyticsTracker(path).load()


class TestAnalyticsCli:
    def test_create_and_results(self, tmp_path, capsys):
        path = str(tmp_path / "analytics.json")
        assert analytics_main(["--path", path, "create", "--name", "Prompt wording"]) == 0
        exp_id = capsys.readouterr().out.strip().splitlines()[-1]

        assert analytics_main(["--path", path, "results", exp_id]) == 0
        out = capsys.readouterr().out
        assert "A/B Test Results: Prompt wording" in out
        assert "Not enough data" in out

    def test_unknown_experiment(self, tmp_path):
        assert analytics_main(["--path", str(tmp_path / "a.json"), "results", "exp_missing"]) == 1
