"""Tests for the developer battle engine."""

from datetime import UTC, datetime, timedelta

import pytest

from app.exceptions import BattleNotReadyError, UnknownMetricError
from services.battle_engine import (
    OVERALL,
    BattleRoster,
    BattleStats,
    build_battle_stats,
    metric_names,
    metric_winner,
    overall_score,
    participant_stats,
    rank_by,
    winner,
)
from services.models import GitHubUser, Repository

NOW = datetime(2026, 6, 15, tzinfo=UTC)


def _user(login: str, **overrides) -> GitHubUser:
    return GitHubUser(login=login, **overrides)


def _stats(login: str, overall: int, **metrics: float) -> BattleStats:
    return BattleStats(login=login, overall_score=overall, metrics=metrics)


class TestBattleRoster:
    def test_add_accepts_up_to_three(self):
        roster = BattleRoster()
        for login in ("a", "b", "c"):
            change = roster.add(_user(login), [])
            assert change.accepted
        assert roster.logins == ["a", "b", "c"]
        assert change.size == 3

    def test_duplicate_login_is_rejected(self):
        roster = BattleRoster()
        roster.add(_user("alice"), [])
        change = roster.add(_user("alice", followers=999), [])
        assert not change.accepted
        assert change.message == "User already in comparison list"
        assert len(roster) == 1
        assert roster.participants[0].user.followers == 0

    def test_fourth_participant_is_rejected(self):
        roster = BattleRoster()
        for login in ("a", "b", "c"):
            roster.add(_user(login), [])
        change = roster.add(_user("d"), [])
        assert not change.accepted
        assert change.message == "Maximum 3 users for comparison"
        assert len(roster) == 3
        assert "d" not in roster

    def test_remove(self):
        roster = BattleRoster()
        roster.add(_user("a"), [])
        roster.add(_user("b"), [])
        assert roster.remove("a").accepted
        assert roster.logins == ["b"]
        assert not roster.remove("zzz").accepted
        assert len(roster) == 1

    def test_round_trips_through_dict(self):
        roster = BattleRoster()
        roster.add(_user("a", followers=3), [Repository(name="r", stargazers_count=7)])
        restored = BattleRoster.from_dict(roster.to_dict())
        assert restored.logins == ["a"]
        assert restored.participants[0].repos[0].stargazers_count == 7


class TestScoring:
    def test_overall_score_weights(self):
        user = _user("a", followers=10, public_repos=5)
        repos = [Repository(name="r", stargazers_count=100, forks_count=20)]
        # 0.3*100 + 0.2*20 + 0.3*10 + 0.2*5 = 38
        assert overall_score(user, repos) == 38

    def test_overall_score_rounds_half_up(self):
        # 0.3*5 = 1.5
        assert overall_score(_user("a"), [Repository(name="r", stargazers_count=5)]) == 2

    def test_participant_metrics(self):
        user = _user("a", followers=7, public_repos=4)
        repos = [
            Repository(name="new", stargazers_count=3, forks_count=1, updated_at=NOW - timedelta(days=10)),
            Repository(name="old", stargazers_count=2, updated_at=NOW - timedelta(days=400)),
        ]
        stats = participant_stats(user, repos, now=NOW)
        assert stats.metrics == {
            "Star Power": 5,
            "Fork Force": 1,
            "Social Influence": 7,
            "Repository Count": 4,
            "Activity Score": 50,
        }

    def test_activity_window_is_configurable(self):
        repos = [Repository(name="r", updated_at=NOW - timedelta(days=60))]
        assert participant_stats(_user("a"), repos, now=NOW).metrics["Activity Score"] == 100
        stats = participant_stats(_user("a"), repos, now=NOW, window_months=1)
        assert stats.metrics["Activity Score"] == 0

    def test_empty_repos_yield_zero_activity(self):
        stats = participant_stats(_user("a"), [], now=NOW)
        assert stats.metrics["Activity Score"] == 0
        assert stats.overall_score == 0

    def test_build_battle_stats_follows_roster_order(self):
        roster = BattleRoster()
        roster.add(_user("x", followers=1), [])
        roster.add(_user("y", followers=100), [])
        assert [s.login for s in build_battle_stats(roster, now=NOW)] == ["x", "y"]


class TestRanking:
    def test_rank_by_metric_descending(self):
        stats = [
            _stats("a", 10, **{"Star Power": 5}),
            _stats("b", 30, **{"Star Power": 50}),
            _stats("c", 20, **{"Star Power": 1}),
        ]
        assert [s.login for s in rank_by("Star Power", stats)] == ["b", "a", "c"]
        assert [s.login for s in rank_by(OVERALL, stats)] == ["b", "c", "a"]

    def test_rank_by_is_stable(self):
        stats = [_stats("a", 5), _stats("b", 9), _stats("c", 5)]
        assert [s.login for s in rank_by(OVERALL, stats)] == ["b", "a", "c"]

    def test_unknown_metric(self):
        with pytest.raises(UnknownMetricError):
            rank_by("Vibes", [_stats("a", 1)])

    def test_metric_names(self):
        assert metric_names()[0] == OVERALL
        assert "Activity Score" in metric_names()


class TestWinner:
    def test_strictly_largest_wins(self):
        stats = [_stats("a", 10), _stats("b", 25), _stats("c", 20)]
        assert winner(stats).login == "b"

    def test_tie_goes_to_first(self):
        stats = [_stats("a", 25), _stats("b", 25)]
        assert winner(stats).login == "a"

    @pytest.mark.parametrize("size", [0, 1])
    def test_no_battle_below_two(self, size):
        stats = [_stats(f"u{i}", 1) for i in range(size)]
        with pytest.raises(BattleNotReadyError):
            winner(stats)

    def test_metric_winner(self):
        stats = [
            _stats("a", 99, **{"Fork Force": 1}),
            _stats("b", 1, **{"Fork Force": 8}),
        ]
        assert metric_winner("Fork Force", stats).login == "b"
