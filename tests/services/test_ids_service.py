"""Tests for IdService collision avoidance."""

from unittest.mock import patch

import pytest

from pagetree.domain.types import NodeKind
from pagetree.services.ids import IdExhaustedError, IdService

GENERATE = "pagetree.services.ids.generate_id"


class TestIdService:
    def test_prefix_by_kind(self) -> None:
        service = IdService(set)
        assert service.new_id(NodeKind.COLUMN).startswith("col_")

    def test_skips_taken_ids(self) -> None:
        candidates = iter(["cmp_aaaa", "cmp_bbbb"])
        service = IdService(lambda: {"cmp_aaaa"})
        with patch(GENERATE, side_effect=lambda *a, **k: next(candidates)):
            assert service.new_id(NodeKind.COMPONENT) == "cmp_bbbb"

    def test_never_reissues(self) -> None:
        candidates = iter(["cmp_aaaa", "cmp_aaaa", "cmp_cccc"])
        service = IdService(set)
        with patch(GENERATE, side_effect=lambda *a, **k: next(candidates)):
            first = service.new_id(NodeKind.COMPONENT)
            second = service.new_id(NodeKind.COMPONENT)
        assert (first, second) == ("cmp_aaaa", "cmp_cccc")

    def test_exhausted(self) -> None:
        service = IdService(lambda: {"cmp_aaaa"}, max_attempts=3)
        with (
            patch(GENERATE, return_value="cmp_aaaa"),
            pytest.raises(IdExhaustedError, match="after 3 attempts"),
        ):
            service.new_id(NodeKind.COMPONENT)

    def test_hex_length_passed_through(self) -> None:
        service = IdService(set, hex_length=12)
        assert len(service.new_id(NodeKind.ROW)) == len("row_") + 12
