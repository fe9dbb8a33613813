"""Exam date parsing.

The statistics service reports exam dates either day-first
(``DD-MM-YYYY``) or year-first (``YYYY-MM-DD``).  Segment length decides
which: a 4-digit final segment means day-first, a 4-digit first segment
means year-first.
"""

from __future__ import annotations

from datetime import date


def parse_exam_date(value: str | None) -> date | None:
    """Parse an exam date string, returning None when it is not a date."""
    if not value:
        return None
    parts = value.strip().replace("/", "-").split("-")
    if len(parts) != 3:
        return None

    if len(parts[2]) == 4:
        day, month, year = parts
    elif len(parts[0]) == 4:
        year, month, day = parts
    else:
        return None

    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None
