"""Tests for monotonic sequence allocation."""

import pytest
from sqlalchemy import delete
from sqlalchemy.engine import Engine

from scorectl.infrastructure.database.counters import next_sequential_value
from scorectl.infrastructure.database.schema import id_counters


class TestNextSequentialValue:
    def test_first_value(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            assert next_sequential_value(conn, "supervisor") == 1

    def test_sequential_increment(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            values = [next_sequential_value(conn, "contestant") for _ in range(4)]
        assert values == [1, 2, 3, 4]

    def test_independent_counters(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            sup1 = next_sequential_value(conn, "supervisor")
            con1 = next_sequential_value(conn, "contestant")
            sup2 = next_sequential_value(conn, "supervisor")
        assert (sup1, con1, sup2) == (1, 1, 2)

    def test_rolled_back_claim_is_reused(self, db_engine: Engine) -> None:
        """A claim only sticks when the caller's transaction commits."""
        with pytest.raises(RuntimeError):
            with db_engine.begin() as conn:
                next_sequential_value(conn, "supervisor")
                raise RuntimeError("abort")
        with db_engine.begin() as conn:
            assert next_sequential_value(conn, "supervisor") == 1

    def test_missing_row_is_created(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            conn.execute(delete(id_counters).where(id_counters.c.kind == "contestant"))
            assert next_sequential_value(conn, "contestant") == 1
            assert next_sequential_value(conn, "contestant") == 2

    def test_unknown_kind_raises(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            with pytest.raises(ValueError, match="Unknown sequence kind"):
                next_sequential_value(conn, "score")
