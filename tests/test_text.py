"""Tests for slug derivation and list/date normalization."""

from datetime import date

import pytest

from portfolio.text import normalize_list, parse_partial_date, slugify


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Languages", "languages"),
        ("Cloud & DevOps", "cloud-devops"),
        ("  --Front  End-- ", "front-end"),
        ("C++ / C#", "c-c"),
        ("!!!", ""),
    ],
)
def test_slugify(title: str, expected: str):
    assert slugify(title) == expected


class TestNormalizeList:
    def test_blank_lines_dropped_order_kept(self):
        assert normalize_list("A\n\nB\n") == ["A", "B"]

    def test_windows_line_endings(self):
        assert normalize_list("A\r\nB\r\n") == ["A", "B"]

    def test_json_array(self):
        assert normalize_list('["A", " B ", ""]') == ["A", "B"]

    def test_text_that_only_looks_like_json(self):
        assert normalize_list("[draft] write docs\nship") == ["[draft] write docs", "ship"]

    def test_sequence_elements_are_split(self):
        assert normalize_list(["A\nB", "  ", "C"]) == ["A", "B", "C"]

    def test_none_is_empty(self):
        assert normalize_list(None) == []

    def test_comma_separator(self):
        assert normalize_list("Python, FastAPI,,  Docker ", separator=",") == [
            "Python", "FastAPI", "Docker",
        ]

    def test_json_array_with_comma_separator(self):
        assert normalize_list('["Go", "Rust"]', separator=",") == ["Go", "Rust"]

    @pytest.mark.parametrize("value", [5, 1.5, {"a": 1}, True, [["nested"]], [{"a": 1}]])
    def test_non_list_values_raise(self, value):
        with pytest.raises(ValueError):
            normalize_list(value)

    def test_tuple_accepted(self):
        assert normalize_list(("A", "B")) == ["A", "B"]


class TestParsePartialDate:
    def test_full_date(self):
        assert parse_partial_date("2021-03-04") == date(2021, 3, 4)

    def test_year_month(self):
        assert parse_partial_date("2021-03") == date(2021, 3, 1)

    def test_blank(self):
        assert parse_partial_date("  ") is None
        assert parse_partial_date(None) is None

    def test_timestamp_keeps_date(self):
        assert parse_partial_date("2021-03-04T10:00:00Z") == date(2021, 3, 4)
        assert parse_partial_date("2021-03-04 10:00:00+02:00") == date(2021, 3, 4)

    @pytest.mark.parametrize(
        "value", ["yesterday", "2020-01-15garbage", "2020-01-15T", "2020-13", "2020"]
    )
    def test_garbage_raises(self, value):
        with pytest.raises(ValueError):
            parse_partial_date(value)
