"""Tests for common.utils module."""

import pytest

from common.utils import chunked, clamp, collapse_whitespace, get_value


class TestGetValue:
    def test_dict_access(self) -> None:
        obj = {"name": "test"}
        assert get_value(obj, "name") == "test"

    def test_object_attribute_access(self) -> None:
        class Obj:
            name = "test"

        assert get_value(Obj(), "name") == "test"

    def test_dict_missing_key_returns_none(self) -> None:
        assert get_value({}, "missing") is None

    def test_object_missing_attr_returns_none(self) -> None:
        class Obj:
            pass

        assert get_value(Obj(), "missing") is None


class TestChunked:
    def test_splits_into_fixed_size_chunks(self) -> None:
        assert list(chunked(range(7), 3)) == [[0, 1, 2], [3, 4, 5], [6]]

    def test_exact_multiple_has_no_trailing_chunk(self) -> None:
        assert list(chunked(range(600), 300)) == [list(range(300)), list(range(300, 600))]

    def test_empty_input(self) -> None:
        assert list(chunked([], 300)) == []

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            list(chunked([1, 2], 0))


class TestClamp:
    def test_within_range(self) -> None:
        assert clamp(5, 1, 10) == 5

    def test_below_range(self) -> None:
        assert clamp(0, 1, 10) == 1

    def test_above_range(self) -> None:
        assert clamp(5000, 1, 1000) == 1000


class TestCollapseWhitespace:
    def test_collapses_runs(self) -> None:
        assert collapse_whitespace("  a \n\t b  ") == "a b"
