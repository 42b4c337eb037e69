"""Tests for the path codec."""

import pytest

from pagetree.domain.errors import MalformedPathError, NoParentError
from pagetree.domain.paths import decode, encode, parent, same_parent


class TestEncode:
    def test_joins_with_separator(self) -> None:
        assert encode([0, 1, 2]) == "0-1-2"

    def test_single_index(self) -> None:
        assert encode((3,)) == "3"

    def test_multi_digit_indices(self) -> None:
        assert encode([10, 0, 125]) == "10-0-125"

    def test_empty_rejected(self) -> None:
        with pytest.raises(MalformedPathError):
            encode([])

    def test_negative_rejected(self) -> None:
        with pytest.raises(MalformedPathError):
            encode([0, -1])

    def test_bool_rejected(self) -> None:
        with pytest.raises(MalformedPathError):
            encode([True])


class TestDecode:
    def test_splits_indices(self) -> None:
        assert decode("0-1-2") == (0, 1, 2)

    def test_round_trip(self) -> None:
        for indices in [(0,), (4, 2), (1, 0, 7), (12, 3, 0)]:
            assert decode(encode(indices)) == indices

    def test_leading_zeros_parse(self) -> None:
        assert decode("01-2") == (1, 2)

    def test_sequence_input_is_validated(self) -> None:
        assert decode([1, 2]) == (1, 2)
        with pytest.raises(MalformedPathError):
            decode([1, -2])

    @pytest.mark.parametrize("path", ["", "-", "0--1", "a-1", "1-b", " 1", "1.5", "-1", "0-"])
    def test_malformed(self, path: str) -> None:
        with pytest.raises(MalformedPathError) as exc_info:
            decode(path)
        assert exc_info.value.code == "MALFORMED_PATH"

    def test_non_ascii_digits_rejected(self) -> None:
        with pytest.raises(MalformedPathError):
            decode("١-0")  # Arabic-Indic digit one


class TestParent:
    def test_drops_last_segment(self) -> None:
        assert parent("0-1-2") == "0-1"

    def test_tuple_form_preserved(self) -> None:
        assert parent((0, 1)) == (0,)

    def test_depth_one_has_no_parent(self) -> None:
        with pytest.raises(NoParentError) as exc_info:
            parent("3")
        assert exc_info.value.code == "NO_PARENT"


class TestHelpers:
    def test_same_parent_siblings(self) -> None:
        assert same_parent("0-0-0", "0-0-3")

    def test_same_parent_rows(self) -> None:
        """Depth-1 paths share the layout root."""
        assert same_parent("0", "4")

    def test_different_parent(self) -> None:
        assert not same_parent("0-0-0", "0-1-0")

    def test_different_depth(self) -> None:
        assert not same_parent("0-0", "0-0-0")
