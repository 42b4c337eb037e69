"""Tests for project id allocation."""

import pytest
from sqlalchemy.engine import Engine

from pagetree.infrastructure.database.counters import claim_project_id, format_project_id


def test_format_pads_to_four_digits() -> None:
    assert format_project_id(7) == "PRJ-0007"
    assert format_project_id(12345) == "PRJ-12345"


class TestClaimProjectId:
    def test_first_claim(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            assert claim_project_id(conn) == "PRJ-0001"

    def test_claims_in_one_transaction(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            ids = [claim_project_id(conn) for _ in range(3)]
        assert ids == ["PRJ-0001", "PRJ-0002", "PRJ-0003"]

    def test_counter_survives_commit(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            claim_project_id(conn)
        with db_engine.begin() as conn:
            assert claim_project_id(conn) == "PRJ-0002"

    def test_rollback_returns_the_id(self, db_engine: Engine) -> None:
        with pytest.raises(RuntimeError), db_engine.begin() as conn:
            claim_project_id(conn)
            raise RuntimeError("abort")
        with db_engine.begin() as conn:
            assert claim_project_id(conn) == "PRJ-0001"
