"""Tests for the aggregation engine.

Covers the summary/share/comparison invariants, distribution ordering,
table shaping, filter options and snapshot assembly.
"""

from __future__ import annotations

import random

from admitpulse.core.aggregation import (
    aggregate,
    build_filter_options,
    build_snapshot,
    build_table,
    compare_logins,
    distribution,
    empty_snapshot,
    login_type_share,
    round_half_up_percent,
    summarize,
)
from admitpulse.domain.record import StatsRecord

from tests.test_record import _record


def _example_records() -> list[StatsRecord]:
    return [
        _record(centre_id="08", verification_mode="A", admit_count=10),
        _record(centre_id="08", verification_mode="M", admit_count=5),
        _record(centre_id="06", verification_mode="A", admit_count=3),
    ]


def _random_records(seed: int, n: int = 40) -> list[StatsRecord]:
    rng = random.Random(seed)
    return [
        _record(
            upsc_exam_code=rng.choice(["CMS-2024", "ESE-2024", "NDA-2024"]),
            exam_session=rng.choice(["FN", "AN"]),
            centre_id=rng.choice(["08", "06", "12", "45"]),
            sub_centre_id=f"{rng.randint(1, 5):03d}",
            verification_mode=rng.choice(["A", "M"]),
            admit_count=rng.randint(0, 500),
        )
        for _ in range(n)
    ]


# ── Worked example ───────────────────────────────────────────────────────────


class TestWorkedExample:
    def test_summary(self) -> None:
        summary = summarize(_example_records())
        assert (summary.total_admits, summary.automated_logins, summary.manual_logins) == (18, 13, 5)

    def test_comparison(self) -> None:
        comparison = {c.centre_id: (c.automated, c.manual) for c in compare_logins(_example_records())}
        assert comparison == {"08": (10, 5), "06": (3, 0)}

    def test_share(self) -> None:
        share = login_type_share(summarize(_example_records()))
        assert share.automated_percentage == 72
        assert share.manual_percentage == 28


# ── Invariants ───────────────────────────────────────────────────────────────


class TestInvariants:
    def test_automated_plus_manual_equals_total(self) -> None:
        for seed in range(20):
            summary = summarize(_random_records(seed))
            assert summary.automated_logins + summary.manual_logins == summary.total_admits

    def test_comparison_sums_to_total(self) -> None:
        for seed in range(20):
            records = _random_records(seed)
            total = sum(c.automated + c.manual for c in compare_logins(records))
            assert total == summarize(records).total_admits

    def test_share_within_bounds(self) -> None:
        for seed in range(20):
            share = login_type_share(summarize(_random_records(seed)))
            assert 0 <= share.automated_percentage <= 100
            assert 0 <= share.manual_percentage <= 100

    def test_distributions_sorted_descending(self) -> None:
        for seed in range(20):
            parts = aggregate(_random_records(seed))
            for dist in (parts.students_per_centre, parts.students_per_course, parts.students_per_session):
                values = [d.value for d in dist]
                assert values == sorted(values, reverse=True)


# ── Share rounding ───────────────────────────────────────────────────────────


class TestShareRounding:
    def test_zero_total_gives_zero_zero(self) -> None:
        share = login_type_share(summarize([]))
        assert (share.automated_percentage, share.manual_percentage) == (0, 0)

    def test_half_rounds_up(self) -> None:
        assert round_half_up_percent(1, 8) == 13  # 12.5
        assert round_half_up_percent(1, 200) == 1  # 0.5

    def test_independent_rounding_may_exceed_hundred(self) -> None:
        # 50.5% + 49.5% → 51 + 50
        records = [
            _record(verification_mode="A", admit_count=101),
            _record(verification_mode="M", admit_count=99),
        ]
        share = login_type_share(summarize(records))
        assert (share.automated_percentage, share.manual_percentage) == (51, 50)

    def test_unknown_mode_counts_only_toward_total(self) -> None:
        records = [_record(verification_mode="A", admit_count=1), _record(verification_mode="X", admit_count=3)]
        summary = summarize(records)
        assert (summary.total_admits, summary.automated_logins, summary.manual_logins) == (4, 1, 0)


# ── Grouping order ───────────────────────────────────────────────────────────


class TestOrdering:
    def test_comparison_ascending_centre(self) -> None:
        records = [_record(centre_id=c) for c in ("45", "08", "12", "6")]
        assert [c.centre_id for c in compare_logins(records)] == ["6", "08", "12", "45"]

    def test_distribution_ties_keep_first_seen_order(self) -> None:
        records = [
            _record(exam_session="AN", admit_count=5),
            _record(exam_session="FN", admit_count=5),
            _record(exam_session="EV", admit_count=9),
        ]
        dist = distribution(records, lambda r: r.exam_session)
        assert [(d.label, d.value) for d in dist] == [("EV", 9), ("AN", 5), ("FN", 5)]

    def test_distribution_sums_per_label(self) -> None:
        records = [
            _record(upsc_exam_code="CMS-2024", admit_count=2),
            _record(upsc_exam_code="ESE-2024", admit_count=7),
            _record(upsc_exam_code="CMS-2024", admit_count=6),
        ]
        parts = aggregate(records)
        assert [(d.label, d.value) for d in parts.students_per_course] == [("CMS-2024", 8), ("ESE-2024", 7)]


# ── Table ────────────────────────────────────────────────────────────────────


class TestTable:
    def test_one_row_per_record_in_input_order(self) -> None:
        records = _example_records()
        rows = build_table(records)
        assert len(rows) == 3
        assert [r.centre_id for r in rows] == ["08", "08", "06"]
        assert rows[1].verification_mode == "M"
        assert rows[1].admit_count == 5

    def test_centre_label_uses_city_table(self) -> None:
        rows = build_table([_record(centre_id="08"), _record(centre_id="99")])
        assert rows[0].centre_label == "Delhi (08)"
        assert rows[1].centre_label == "99"

    def test_row_wire_names(self) -> None:
        row = build_table([_record()])[0]
        dumped = row.model_dump(by_alias=True)
        assert set(dumped) == {
            "examCode", "examDate", "examSession", "centreId",
            "centreLabel", "subCentreId", "verificationMode", "admitCount",
        }


# ── Filter options ───────────────────────────────────────────────────────────


class TestFilterOptions:
    def test_all_label_leads_each_list(self) -> None:
        options = build_filter_options([])
        assert options.exam_codes == ("All Exam Codes",)
        assert options.centre_ids == ("All Cities",)
        assert options.verification_modes == ("All Modes",)

    def test_values_unique_and_ordered(self) -> None:
        records = [
            _record(upsc_exam_code="ESE-2024", exam_date="2024-06-05", exam_session="AN", centre_id="12"),
            _record(upsc_exam_code="CMS-2024", exam_date="07-06-2024", exam_session="FN", centre_id="08"),
            _record(upsc_exam_code="CMS-2024", exam_date="05-06-2024", exam_session="EV", centre_id="08"),
        ]
        options = build_filter_options(records)
        assert options.exam_codes == ("All Exam Codes", "PT CMS-2024", "PT ESE-2024")
        assert options.exam_dates == ("All Dates", "07-06-2024", "2024-06-05", "05-06-2024")
        assert options.sessions == ("All Sessions", "FN", "AN", "EV")
        assert options.centre_ids == ("All Cities", "08", "12")


# ── Snapshot assembly ────────────────────────────────────────────────────────


class TestBuildSnapshot:
    def test_empty_input_is_all_zero(self) -> None:
        snap = build_snapshot([], last_updated="t0")
        assert snap.summary.total_admits == 0
        assert snap.summary.automated_logins == 0
        assert snap.summary.manual_logins == 0
        assert snap.login_comparison == ()
        assert snap.students_per_centre == ()
        assert snap.students_per_course == ()
        assert snap.students_per_session == ()
        assert snap.table == ()
        assert (snap.login_type_share.automated_percentage, snap.login_type_share.manual_percentage) == (0, 0)
        assert snap.last_updated == "t0"

    def test_empty_snapshot_stamps_now(self) -> None:
        assert empty_snapshot().last_updated

    def test_options_come_from_available_records(self) -> None:
        available = [_record(centre_id="08"), _record(centre_id="06")]
        snap = build_snapshot(available[:1], available=available, last_updated="t0")
        assert snap.summary.total_admits == 10
        assert snap.filters.centre_ids == ("All Cities", "06", "08")

    def test_sort_table_applies_display_order(self) -> None:
        records = [
            _record(exam_date="05-06-2024", centre_id="12"),
            _record(exam_date="2024-06-07", centre_id="08"),
            _record(exam_date="05-06-2024", centre_id="08"),
        ]
        unsorted = build_snapshot(records, last_updated="t0")
        ordered = build_snapshot(records, last_updated="t0", sort_table=True)
        assert [r.centre_id for r in unsorted.table] == ["12", "08", "08"]
        assert [(r.exam_date, r.centre_id) for r in ordered.table] == [
            ("2024-06-07", "08"),
            ("05-06-2024", "08"),
            ("05-06-2024", "12"),
        ]

    def test_snapshot_wire_names(self) -> None:
        dumped = build_snapshot(_example_records(), last_updated="t0").model_dump(by_alias=True)
        assert dumped["summary"] == {"totalAdmits": 18, "automatedLogins": 13, "manualLogins": 5}
        assert dumped["loginTypeShare"] == {"automatedPercentage": 72, "manualPercentage": 28}
        assert {"studentsPerCentre", "studentsPerCourse", "studentsPerSession", "lastUpdated"} <= set(dumped)
