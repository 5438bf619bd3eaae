"""Tests for derived statistics."""

from __future__ import annotations

import pytest

from scorectl.domain.aggregates import (
    competition_statistics,
    is_passing,
    mean_score,
    rank_of,
    round2,
    supervisor_statistics,
)


class TestRounding:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(75.125, 75.13), (2.675, 2.68), (10.0, 10.0), (66.666, 66.67)],
    )
    def test_round_half_up(self, value: float, expected: float) -> None:
        assert round2(value) == expected

    def test_mean_of_nothing_is_zero(self) -> None:
        assert mean_score([]) == 0.0

    def test_mean_is_rounded(self) -> None:
        assert mean_score([70, 80, 81]) == 77.0
        assert mean_score([70.5, 80.25, 80.1]) == 76.95


class TestPassing:
    def test_threshold_is_inclusive(self) -> None:
        assert is_passing(50.0, 50.0)
        assert not is_passing(49.99, 50.0)


class TestRank:
    def test_ties_share_rank_and_skip(self) -> None:
        values = [90, 80, 80, 70]
        assert [rank_of(v, values) for v in values] == [1, 2, 2, 4]

    def test_single_score_is_first(self) -> None:
        assert rank_of(42.0, [42.0]) == 1


class TestCompetitionStatistics:
    def test_empty(self) -> None:
        stats = competition_statistics([], 50.0)
        assert stats.to_dict() == {
            "total_contestants": 0,
            "passed_count": 0,
            "failed_count": 0,
            "average_score": 0.0,
            "success_rate": 0.0,
        }

    def test_counts_add_up(self) -> None:
        stats = competition_statistics([45, 50, 70, 30], 50.0)
        assert stats.total_contestants == 4
        assert stats.passed_count == 2
        assert stats.failed_count == stats.total_contestants - stats.passed_count
        assert stats.average_score == 48.75
        assert stats.success_rate == 50.0

    def test_success_rate_rounded(self) -> None:
        stats = competition_statistics([60, 60, 10], 50.0)
        assert stats.success_rate == 66.67


class TestSupervisorStatistics:
    def test_available_slots(self) -> None:
        stats = supervisor_statistics(contestants_count=3, max_contestants=10, score_values=[])
        assert stats.available_slots == 7
        assert stats.scores_count == 0
        assert stats.average_score == 0.0

    def test_average_over_group_scores(self) -> None:
        stats = supervisor_statistics(
            contestants_count=2, max_contestants=2, score_values=[80.0, 65.5]
        )
        assert stats.to_dict() == {
            "contestants_count": 2,
            "scores_count": 2,
            "average_score": 72.75,
            "available_slots": 0,
        }
