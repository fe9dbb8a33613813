"""Aggregation Engine: in-scope records → snapshot sub-objects.

Pure and synchronous.  Every function accepts an already-filtered
sequence of canonical records; none of them looks at filters, clocks or
the network.

Invariants:
    - automated + manual == total whenever every record's mode is A or M
    - login comparison entries sum (automated + manual) to the same total
    - distributions are sorted by value descending, ties keep the order
      in which each label was first seen
    - empty input never raises; it yields zeros and empty collections
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from admitpulse.core.ordering import (
    identifier_key,
    sort_dates_desc,
    sort_sessions,
    sort_table_rows,
)
from admitpulse.domain.centres import format_centre
from admitpulse.domain.enums import VerificationMode
from admitpulse.domain.exam_codes import format_exam_code
from admitpulse.domain.record import StatsRecord
from admitpulse.domain.snapshot import (
    ALL_CITIES,
    ALL_DATES,
    ALL_EXAM_CODES,
    ALL_MODES,
    ALL_SESSIONS,
    ALL_SUB_CENTRES,
    DashboardSnapshot,
    DistributionDatum,
    FilterOptions,
    LoginComparisonItem,
    LoginTypeShare,
    Summary,
    TableRow,
)
from admitpulse.foundation.clock import utc_now_iso

_AUTOMATED = VerificationMode.AUTOMATED.value
_MANUAL = VerificationMode.MANUAL.value


@dataclass(frozen=True)
class Aggregates:
    """Everything the engine derives from one in-scope record set."""

    summary: Summary
    login_comparison: tuple[LoginComparisonItem, ...]
    login_type_share: LoginTypeShare
    students_per_centre: tuple[DistributionDatum, ...]
    students_per_course: tuple[DistributionDatum, ...]
    students_per_session: tuple[DistributionDatum, ...]
    table: tuple[TableRow, ...]


def round_half_up_percent(part: int, total: int) -> int:
    """round(100 * part / max(total, 1)), halves rounded up, in integers."""
    denominator = max(total, 1)
    return (200 * part + denominator) // (2 * denominator)


# ── Summary & share ──────────────────────────────────────────────────────────


def summarize(records: Iterable[StatsRecord]) -> Summary:
    total = automated = manual = 0
    for record in records:
        total += record.admit_count
        if record.verification_mode == _AUTOMATED:
            automated += record.admit_count
        elif record.verification_mode == _MANUAL:
            manual += record.admit_count
    return Summary(total_admits=total, automated_logins=automated, manual_logins=manual)


def login_type_share(summary: Summary) -> LoginTypeShare:
    """Percent split of admits by verification mode.

    Each side is rounded on its own; 50.5 / 49.5 becomes 51 / 50.
    """
    return LoginTypeShare(
        automated_percentage=round_half_up_percent(summary.automated_logins, summary.total_admits),
        manual_percentage=round_half_up_percent(summary.manual_logins, summary.total_admits),
    )


# ── Grouping ─────────────────────────────────────────────────────────────────


def compare_logins(records: Iterable[StatsRecord]) -> tuple[LoginComparisonItem, ...]:
    """Automated vs manual admits per centre, ascending centre identifier."""
    buckets: dict[str, list[int]] = {}
    for record in records:
        bucket = buckets.setdefault(record.centre_id, [0, 0])
        if record.verification_mode == _AUTOMATED:
            bucket[0] += record.admit_count
        elif record.verification_mode == _MANUAL:
            bucket[1] += record.admit_count

    return tuple(
        LoginComparisonItem(centre_id=centre, automated=automated, manual=manual)
        for centre, (automated, manual) in sorted(buckets.items(), key=lambda kv: identifier_key(kv[0]))
    )


def distribution(
    records: Iterable[StatsRecord],
    label_of: Callable[[StatsRecord], str],
) -> tuple[DistributionDatum, ...]:
    """Sum admits per label, largest first.

    ``sorted`` is stable, so labels with equal totals keep first-seen order.
    """
    totals: dict[str, int] = {}
    for record in records:
        label = label_of(record)
        totals[label] = totals.get(label, 0) + record.admit_count

    ranked = sorted(totals.items(), key=lambda kv: -kv[1])
    return tuple(DistributionDatum(label=label, value=value) for label, value in ranked)


def build_table(records: Iterable[StatsRecord]) -> tuple[TableRow, ...]:
    """One display row per record, input order preserved."""
    return tuple(
        TableRow(
            exam_code=record.upsc_exam_code,
            exam_date=record.exam_date,
            exam_session=record.exam_session,
            centre_id=record.centre_id,
            centre_label=format_centre(record.centre_id),
            sub_centre_id=record.sub_centre_id,
            verification_mode=record.verification_mode,
            admit_count=record.admit_count,
        )
        for record in records
    )


def aggregate(records: Sequence[StatsRecord]) -> Aggregates:
    summary = summarize(records)
    return Aggregates(
        summary=summary,
        login_comparison=compare_logins(records),
        login_type_share=login_type_share(summary),
        students_per_centre=distribution(records, lambda r: r.centre_id),
        students_per_course=distribution(records, lambda r: r.upsc_exam_code),
        students_per_session=distribution(records, lambda r: r.exam_session),
        table=build_table(records),
    )


# ── Filter options ───────────────────────────────────────────────────────────


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def build_filter_options(records: Sequence[StatsRecord]) -> FilterOptions:
    """Selectable values per dimension, derived from the available records."""
    exam_codes = sorted(_unique(r.upsc_exam_code for r in records))
    return FilterOptions(
        exam_codes=(ALL_EXAM_CODES, *(format_exam_code(code) for code in exam_codes)),
        exam_dates=(ALL_DATES, *sort_dates_desc(_unique(r.exam_date for r in records))),
        sessions=(ALL_SESSIONS, *sort_sessions(_unique(r.exam_session for r in records))),
        centre_ids=(ALL_CITIES, *sorted(_unique(r.centre_id for r in records))),
        sub_centre_ids=(ALL_SUB_CENTRES, *sorted(_unique(r.sub_centre_id for r in records))),
        verification_modes=(ALL_MODES, *sorted(_unique(r.verification_mode for r in records))),
    )


# ── Snapshot assembly ────────────────────────────────────────────────────────


def build_snapshot(
    in_scope: Sequence[StatsRecord],
    *,
    available: Sequence[StatsRecord] | None = None,
    last_updated: str | None = None,
    sort_table: bool = False,
) -> DashboardSnapshot:
    """Assemble a full snapshot.

    Args:
        in_scope: Records that passed the active filter set.
        available: Records the filter options are derived from.  Defaults
            to *in_scope* (server-side filtering only ever sees those).
        last_updated: Source timestamp; local time when the source has none.
        sort_table: Apply the display ordering to table rows.
    """
    parts = aggregate(in_scope)
    table = tuple(sort_table_rows(parts.table)) if sort_table else parts.table
    return DashboardSnapshot(
        summary=parts.summary,
        login_comparison=parts.login_comparison,
        login_type_share=parts.login_type_share,
        students_per_centre=parts.students_per_centre,
        students_per_course=parts.students_per_course,
        students_per_session=parts.students_per_session,
        table=table,
        filters=build_filter_options(in_scope if available is None else available),
        last_updated=last_updated or utc_now_iso(),
    )


def empty_snapshot(last_updated: str | None = None) -> DashboardSnapshot:
    """All-zero snapshot used when there is nothing (yet) to show."""
    return build_snapshot((), last_updated=last_updated)
