"""Tests for ContestantService."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from scorectl.infrastructure.store import Store
from scorectl.services.contestant import ContestantService
from scorectl.services.score import ScoreService
from tests.conftest import (
    build_store,
    make_competition,
    make_contestant,
    make_supervisor,
    record,
)


def _fields(**overrides: object) -> dict[str, object]:
    return {
        "name": "Yasmine Kaci",
        "birth_date": "2010-04-12",
        "education_level": "Middle school",
        **overrides,
    }


class TestCreateContestant:
    def test_generates_registration_number(self, store: Store) -> None:
        result = ContestantService(store).create_contestant(_fields())
        assert result.ok
        assert result.op == "create_contestant"
        assert result.data["registration_number"] == "2024-0001"
        assert result.data["supervisor_id"] is None

    def test_assigns_supervisor(self, store: Store) -> None:
        sup = make_supervisor(store, "Amina Haddad")
        result = ContestantService(store).create_contestant(_fields(supervisor_id=sup["id"]))
        assert result.ok
        assert result.data["supervisor_id"] == sup["id"]
        assert result.data["supervisor_name"] == "Amina Haddad"

    @pytest.mark.parametrize("birth_date", ["2020-01-01", "1998-01-01"])
    def test_age_out_of_range(self, store: Store, birth_date: str) -> None:
        result = ContestantService(store).create_contestant(_fields(birth_date=birth_date))
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
        assert "Age must be between 5 and 25 years" in result.error.message

    @pytest.mark.parametrize("birth_date", ["2019-12-31", "1999-01-01"])
    def test_age_boundaries_accepted(self, store: Store, birth_date: str) -> None:
        assert ContestantService(store).create_contestant(_fields(birth_date=birth_date)).ok

    def test_invalid_birth_date(self, store: Store) -> None:
        result = ContestantService(store).create_contestant(_fields(birth_date="12/04/2010x"))
        assert result.error is not None
        assert "Birth date must be a valid date" in result.error.message

    def test_education_level_required(self, store: Store) -> None:
        result = ContestantService(store).create_contestant(_fields(education_level="  "))
        assert result.error is not None
        assert "Education level is required" in result.error.message

    def test_supervisor_at_capacity(self, store: Store) -> None:
        sup = make_supervisor(store, max_contestants=1)
        make_contestant(store, "Yasmine Kaci", supervisor_id=sup["id"])
        result = ContestantService(store).create_contestant(
            _fields(name="Omar Zidane", supervisor_id=sup["id"])
        )
        assert result.error is not None
        assert result.error.code == "CAPACITY_EXCEEDED"
        assert result.error.detail["current"] == 1
        assert result.error.detail["limit"] == 1

    def test_missing_supervisor(self, store: Store) -> None:
        result = ContestantService(store).create_contestant(_fields(supervisor_id=42))
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_duplicate_registration_number(self, store: Store) -> None:
        svc = ContestantService(store)
        assert svc.create_contestant(_fields(registration_number="2024-0500")).ok
        result = svc.create_contestant(
            _fields(name="Omar Zidane", registration_number="2024-0500")
        )
        assert result.error is not None
        assert result.error.code == "DUPLICATE"


class TestUpdateContestant:
    def test_registration_number_is_immutable(self, store: Store) -> None:
        con = make_contestant(store)
        result = ContestantService(store).update_contestant(
            con["id"], {"registration_number": "2000-0001", "address": "12 Rue Didouche"}
        )
        assert result.ok
        assert result.data["registration_number"] == con["registration_number"]
        assert result.data["address"] == "12 Rue Didouche"
        assert "Cannot change immutable field: registration_number" in result.warnings

    def test_reassign_checks_capacity(self, store: Store) -> None:
        full = make_supervisor(store, "Amina Haddad", max_contestants=1)
        make_contestant(store, "Yasmine Kaci", supervisor_id=full["id"])
        con = make_contestant(store, "Omar Zidane")
        result = ContestantService(store).update_contestant(
            con["id"], {"supervisor_id": full["id"]}
        )
        assert result.error is not None
        assert result.error.code == "CAPACITY_EXCEEDED"

    def test_keeping_same_supervisor_at_capacity(self, store: Store) -> None:
        sup = make_supervisor(store, max_contestants=1)
        con = make_contestant(store, supervisor_id=sup["id"])
        result = ContestantService(store).update_contestant(
            con["id"], {"supervisor_id": sup["id"], "notes": "quiet"}
        )
        assert result.ok
        assert result.data["notes"] == "quiet"

    def test_validation_on_merged_record(self, store: Store) -> None:
        con = make_contestant(store)
        result = ContestantService(store).update_contestant(con["id"], {"name": "Y"})
        assert result.error is not None
        assert "Name must be between 2 and 100 characters" in result.error.message

    def test_aged_out_contestant_stays_editable(self, tmp_path: Path) -> None:
        registered = build_store(tmp_path, now=datetime(2024, 6, 1))
        try:
            sup = make_supervisor(registered)
            con = make_contestant(registered, birth_date="1999-01-01")
        finally:
            registered.close()

        next_year = build_store(tmp_path, now=datetime(2025, 6, 1))
        try:
            result = ContestantService(next_year).update_contestant(
                con["id"], {"notes": "moved", "supervisor_id": sup["id"]}
            )
        finally:
            next_year.close()
        assert result.ok, result.error
        assert result.data["notes"] == "moved"
        assert result.data["supervisor_id"] == sup["id"]

    def test_changed_birth_date_is_age_checked(self, store: Store) -> None:
        con = make_contestant(store)
        result = ContestantService(store).update_contestant(
            con["id"], {"birth_date": "1998-01-01"}
        )
        assert result.error is not None
        assert "Age must be between 5 and 25 years" in result.error.message


class TestDeleteContestant:
    def test_cascades_to_scores(self, store: Store) -> None:
        sup = make_supervisor(store)
        con = make_contestant(store, supervisor_id=sup["id"])
        score = record(store, make_competition(store), con, 64)
        result = ContestantService(store).delete_contestant(con["id"])
        assert result.ok
        assert result.data == {"id": con["id"], "deleted": True, "scores_deleted": 1}
        assert ScoreService(store).get_score(score["id"]).error is not None

    def test_frees_supervisor_slot(self, store: Store) -> None:
        sup = make_supervisor(store, max_contestants=1)
        con = make_contestant(store, "Yasmine Kaci", supervisor_id=sup["id"])
        svc = ContestantService(store)
        assert svc.delete_contestant(con["id"]).ok
        assert svc.create_contestant(_fields(name="Omar Zidane", supervisor_id=sup["id"])).ok

    def test_missing(self, store: Store) -> None:
        result = ContestantService(store).delete_contestant(7)
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestReadContestants:
    def test_search(self, store: Store) -> None:
        make_contestant(store, "Yasmine Kaci")
        make_contestant(store, "Omar Zidane")
        result = ContestantService(store).search_contestants("zid")
        assert result.ok
        assert result.data["query"] == "zid"
        assert [i["name"] for i in result.data["items"]] == ["Omar Zidane"]

    def test_list_by_supervisor(self, store: Store) -> None:
        sup = make_supervisor(store)
        make_contestant(store, "Yasmine Kaci", supervisor_id=sup["id"])
        make_contestant(store, "Omar Zidane")
        result = ContestantService(store).list_contestants(supervisor_id=sup["id"])
        assert result.data["total"] == 1

    def test_average(self, store: Store) -> None:
        sup = make_supervisor(store)
        con = make_contestant(store, supervisor_id=sup["id"])
        record(store, make_competition(store, "Winter Olympiad"), con, 70)
        record(store, make_competition(store, "Spring Olympiad"), con, 75.25)
        result = ContestantService(store).get_average(con["id"])
        assert result.ok
        assert result.data["average_score"] == 72.63
        assert result.data["score_count"] == 2

    def test_average_without_scores(self, store: Store) -> None:
        con = make_contestant(store)
        result = ContestantService(store).get_average(con["id"])
        assert result.data["average_score"] == 0.0

    def test_latest_score(self, store: Store) -> None:
        sup = make_supervisor(store)
        con = make_contestant(store, supervisor_id=sup["id"])
        svc = ContestantService(store)
        assert svc.get_latest_score(con["id"]).data == {
            "contestant_id": con["id"],
            "score": None,
        }
        score = record(store, make_competition(store), con, 81)
        latest = svc.get_latest_score(con["id"]).data["score"]
        assert latest["id"] == score["id"]
        assert latest["passed"] is True
