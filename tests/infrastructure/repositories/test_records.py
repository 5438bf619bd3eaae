"""Tests for RecordRepository read queries."""

from __future__ import annotations

from datetime import date

import pytest

from scorectl.infrastructure.repositories.records import RecordRepository
from scorectl.infrastructure.store import Store
from scorectl.services.contestant import ContestantService
from scorectl.services.score import ScoreService
from tests.conftest import make_competition, make_contestant, make_supervisor, record


@pytest.fixture
def repo(store: Store) -> RecordRepository:
    return RecordRepository(store.engine)


class TestSupervisorQueries:
    def test_search_is_case_insensitive(self, store: Store, repo: RecordRepository) -> None:
        make_supervisor(store, "Amina Haddad")
        make_supervisor(store, "Karim Bensalah")
        rows, total = repo.list_supervisor_rows(search="HADD", page=1, limit=10)
        assert total == 1
        assert rows[0]["name"] == "Amina Haddad"

    def test_search_escapes_wildcards(self, store: Store, repo: RecordRepository) -> None:
        make_supervisor(store, "Amina Haddad")
        rows, total = repo.list_supervisor_rows(search="%", page=1, limit=10)
        assert rows == []
        assert total == 0

    def test_paging(self, store: Store, repo: RecordRepository) -> None:
        for name in ("Ali Ab", "Bea Bb", "Cem Cc"):
            make_supervisor(store, name)
        rows, total = repo.list_supervisor_rows(page=2, limit=2)
        assert total == 3
        assert [r["name"] for r in rows] == ["Cem Cc"]

    def test_find_by_name(self, store: Store, repo: RecordRepository) -> None:
        sup = make_supervisor(store, "Amina Haddad")
        row = repo.find_supervisor_by_name("  amina haddad ")
        assert row is not None
        assert row["id"] == sup["id"]
        assert repo.find_supervisor_by_name("Nobody") is None

    def test_contestant_count_ignores_deleted(self, store: Store, repo: RecordRepository) -> None:
        sup = make_supervisor(store)
        kept = make_contestant(store, "Yasmine Kaci", supervisor_id=sup["id"])
        gone = make_contestant(store, "Omar Zidane", supervisor_id=sup["id"])
        assert ContestantService(store).delete_contestant(gone["id"]).ok
        assert repo.count_supervisor_contestants(sup["id"]) == 1
        assert kept["supervisor_id"] == sup["id"]


class TestContestantQueries:
    def test_joined_supervisor_name(self, store: Store, repo: RecordRepository) -> None:
        sup = make_supervisor(store, "Amina Haddad")
        con = make_contestant(store, supervisor_id=sup["id"])
        row = repo.get_contestant(con["id"])
        assert row is not None
        assert row["supervisor_name"] == "Amina Haddad"

    def test_unassigned_contestant(self, store: Store, repo: RecordRepository) -> None:
        con = make_contestant(store)
        row = repo.get_contestant(con["id"])
        assert row is not None
        assert row["supervisor_name"] is None

    def test_filter_by_supervisor(self, store: Store, repo: RecordRepository) -> None:
        sup = make_supervisor(store)
        make_contestant(store, "Yasmine Kaci", supervisor_id=sup["id"])
        make_contestant(store, "Omar Zidane")
        rows, total = repo.list_contestant_rows(supervisor_id=sup["id"])
        assert total == 1
        assert rows[0]["name"] == "Yasmine Kaci"

    def test_search_limit(self, store: Store, repo: RecordRepository) -> None:
        for name in ("Nour Aa", "Nour Bb", "Nour Cc"):
            make_contestant(store, name)
        assert len(repo.search_contestant_rows("nour", limit=2)) == 2

    def test_export_rows_by_ids(self, store: Store, repo: RecordRepository) -> None:
        first = make_contestant(store, "Yasmine Kaci")
        make_contestant(store, "Omar Zidane")
        rows = repo.contestant_export_rows([first["id"]])
        assert [r["id"] for r in rows] == [first["id"]]

    def test_latest_score(self, store: Store, repo: RecordRepository) -> None:
        sup = make_supervisor(store)
        con = make_contestant(store, supervisor_id=sup["id"])
        first = record(store, make_competition(store, "Winter Olympiad"), con, 60)
        second = record(store, make_competition(store, "Spring Olympiad"), con, 75)
        latest = repo.latest_contestant_score(con["id"])
        assert latest is not None
        # Same clock instant: the higher id wins the tie.
        assert latest["id"] == second["id"]
        assert first["id"] < second["id"]


class TestCompetitionQueries:
    def test_status_filter(self, store: Store, repo: RecordRepository) -> None:
        make_competition(store, "Winter Olympiad")
        make_competition(store, "Autumn Cup", start_date="2023-10-01", end_date="2023-10-05")
        make_competition(store, "Summer Cup", start_date="2024-06-01", end_date="2024-06-05")
        today = date(2024, 1, 15)
        for status, title in (
            ("ongoing", "Winter Olympiad"),
            ("ended", "Autumn Cup"),
            ("upcoming", "Summer Cup"),
        ):
            rows, total = repo.list_competition_rows(today=today, status=status)
            assert total == 1
            assert rows[0]["title"] == title

    def test_unknown_status(self, repo: RecordRepository) -> None:
        with pytest.raises(ValueError, match="Unknown competition status"):
            repo.list_competition_rows(today=date(2024, 1, 15), status="paused")

    def test_newest_first(self, store: Store, repo: RecordRepository) -> None:
        make_competition(store, "Autumn Cup", start_date="2023-10-01", end_date="2023-10-05")
        make_competition(store, "Winter Olympiad")
        rows, _ = repo.list_competition_rows(today=date(2024, 1, 15))
        assert [r["title"] for r in rows] == ["Winter Olympiad", "Autumn Cup"]


class TestScoreQueries:
    def test_score_row_carries_names(self, store: Store, repo: RecordRepository) -> None:
        sup = make_supervisor(store, "Amina Haddad")
        con = make_contestant(store, "Yasmine Kaci", supervisor_id=sup["id"])
        comp = make_competition(store, "Winter Olympiad")
        score = record(store, comp, con, 88)
        row = repo.get_score(score["id"])
        assert row is not None
        assert row["competition_title"] == "Winter Olympiad"
        assert row["contestant_name"] == "Yasmine Kaci"
        assert row["supervisor_name"] == "Amina Haddad"
        assert row["passing_score"] == 50.0

    def test_deleted_scores_hidden(self, store: Store, repo: RecordRepository) -> None:
        sup = make_supervisor(store)
        con = make_contestant(store, supervisor_id=sup["id"])
        comp = make_competition(store)
        score = record(store, comp, con, 88)
        assert ScoreService(store).delete_score(score["id"]).ok
        assert repo.get_score(score["id"]) is None
        assert repo.competition_score_values(comp["id"]) == []

    def test_export_rows_sorted_by_value(self, store: Store, repo: RecordRepository) -> None:
        sup = make_supervisor(store)
        comp = make_competition(store)
        for name, value in (("Yasmine Kaci", 61), ("Omar Zidane", 93), ("Lina Saadi", 77)):
            con = make_contestant(store, name, supervisor_id=sup["id"])
            record(store, comp, con, value)
        rows = repo.score_export_rows(competition_id=comp["id"])
        assert [r["score_value"] for r in rows] == [93.0, 77.0, 61.0]
