"""Tests for date parsing, display ordering and label formatting."""

import itertools
from datetime import date

import pytest

from admitpulse.core.aggregation import build_table
from admitpulse.core.ordering import (
    compare_identifiers,
    identifier_key,
    sort_dates_desc,
    sort_sessions,
    sort_table_rows,
)
from admitpulse.domain.centres import centre_name, extract_centre_code, format_centre
from admitpulse.domain.exam_codes import extract_raw_exam_code, format_exam_code
from admitpulse.foundation.dates import parse_exam_date

from tests.test_record import _record


class TestParseExamDate:
    def test_day_first_and_year_first_agree(self) -> None:
        assert parse_exam_date("05-06-2024") == parse_exam_date("2024-06-05") == date(2024, 6, 5)

    def test_slash_separator(self) -> None:
        assert parse_exam_date("05/06/2024") == date(2024, 6, 5)

    @pytest.mark.parametrize("value", ["", None, "yesterday", "05-06", "31-02-2024", "5-6-24"])
    def test_unparseable_returns_none(self, value) -> None:
        assert parse_exam_date(value) is None


class TestCompareIdentifiers:
    def test_numeric_when_both_numbers(self) -> None:
        assert compare_identifiers("9", "10") < 0
        assert compare_identifiers("010", "9") > 0
        assert compare_identifiers("08", "8") == 0

    def test_alphabetic_otherwise(self) -> None:
        assert compare_identifiers("A10", "A9") < 0
        assert compare_identifiers("b", "A") > 0
        assert compare_identifiers("10", "A") < 0

    def test_numbers_sort_before_text(self) -> None:
        assert compare_identifiers("10", "1a") < 0
        assert compare_identifiers("9", "1a") < 0
        assert compare_identifiers("inf", "9") > 0

    def test_mixed_ids_sort_the_same_from_any_start(self) -> None:
        ids = ["1a", "10", "9", "b2", "A3"]
        for start in itertools.permutations(ids):
            assert sorted(start, key=identifier_key) == ["9", "10", "1a", "A3", "b2"]


class TestSortTableRows:
    def test_date_desc_then_centre_then_sub_centre(self) -> None:
        rows = build_table([
            _record(exam_date="05-06-2024", centre_id="12", sub_centre_id="002"),
            _record(exam_date="05-06-2024", centre_id="12", sub_centre_id="001"),
            _record(exam_date="2024-06-07", centre_id="45", sub_centre_id="001"),
            _record(exam_date="05-06-2024", centre_id="9", sub_centre_id="010"),
        ])
        ordered = sort_table_rows(rows)
        assert [(r.exam_date, r.centre_id, r.sub_centre_id) for r in ordered] == [
            ("2024-06-07", "45", "001"),
            ("05-06-2024", "9", "010"),
            ("05-06-2024", "12", "001"),
            ("05-06-2024", "12", "002"),
        ]

    def test_unparseable_dates_last(self) -> None:
        rows = build_table([_record(exam_date=""), _record(exam_date="01-01-2020")])
        assert [r.exam_date for r in sort_table_rows(rows)] == ["01-01-2020", ""]


class TestOptionOrdering:
    def test_dates_latest_first(self) -> None:
        assert sort_dates_desc(["01-06-2024", "2024-06-03", "02-06-2024"]) == [
            "2024-06-03",
            "02-06-2024",
            "01-06-2024",
        ]

    def test_sessions_fn_then_an(self) -> None:
        assert sort_sessions(["EV", "AN", "FN", "AM"]) == ["FN", "AN", "AM", "EV"]


class TestCentreLabels:
    def test_known_code(self) -> None:
        assert centre_name("08") == "Delhi"
        assert format_centre("08") == "Delhi (08)"

    def test_unknown_code_renders_as_is(self) -> None:
        assert centre_name("99") == "99"
        assert format_centre("99") == "99"

    def test_all_label_untouched(self) -> None:
        assert format_centre("All Cities") == "All Cities"

    def test_extract_code(self) -> None:
        assert extract_centre_code("Delhi (08)") == "08"
        assert extract_centre_code("08") == "08"
        assert extract_centre_code("Panaji (Goa) (36)") == "36"


class TestExamCodeLabels:
    @pytest.mark.parametrize(
        "raw, shown",
        [
            ("CMS-2024", "PT CMS-2024"),
            ("ESE-2024", "PT ESE-2024"),
            ("nda-2024", "PT nda-2024"),
            ("IFS-2024", "Mains IFS-2024"),
            ("CSE-2024", "CSE-2024"),
        ],
    )
    def test_format_and_extract(self, raw, shown) -> None:
        assert format_exam_code(raw) == shown
        assert extract_raw_exam_code(shown) == raw
