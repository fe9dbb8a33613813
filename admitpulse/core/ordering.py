"""Display-level ordering for table rows, filter options and comparisons.

Identifiers (centre, sub-centre) that parse as finite numbers sort first,
numerically; everything else follows, alphabetically (case-folded).  So
``"9"`` sorts before ``"10"`` and both sort before ``"1a"``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date
from typing import Union

from admitpulse.domain.snapshot import TableRow
from admitpulse.foundation.dates import parse_exam_date

_SESSION_ORDER = {"FN": 0, "AN": 1}


def _as_number(value: str) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def identifier_key(value: str) -> tuple[Union[int, float, str], ...]:
    """Sort key: numbers first (numerically), then text (case-folded)."""
    number = _as_number(value)
    if number is not None:
        return (0, number)
    return (1, value.casefold(), value)


def compare_identifiers(a: str, b: str) -> int:
    """Three-way comparison consistent with identifier_key."""
    key_a, key_b = identifier_key(a), identifier_key(b)
    return (key_a > key_b) - (key_a < key_b)


def _date_ordinal(value: str) -> int:
    # Unparseable dates sort after every real one in a descending sort.
    parsed = parse_exam_date(value)
    return parsed.toordinal() if parsed else date.min.toordinal() - 1


def _row_key(row: TableRow) -> tuple:
    return (
        -_date_ordinal(row.exam_date),
        identifier_key(row.centre_id),
        identifier_key(row.sub_centre_id),
    )


def sort_table_rows(rows: Iterable[TableRow]) -> list[TableRow]:
    """Latest exam date first, then centre, then sub-centre."""
    return sorted(rows, key=_row_key)


def sort_dates_desc(dates: Iterable[str]) -> list[str]:
    """Latest first; DD-MM-YYYY and YYYY-MM-DD interleave correctly."""
    return sorted(dates, key=_date_ordinal, reverse=True)


def sort_sessions(sessions: Iterable[str]) -> list[str]:
    """FN, then AN, then anything else alphabetically."""
    return sorted(sessions, key=lambda s: (_SESSION_ORDER.get(s, len(_SESSION_ORDER)), s.casefold(), s))
