"""StatsRecord: one row of admission statistics, and its normalizer.

The upstream service is loose about types: centre codes arrive as strings
or numbers, dates use ``/`` or ``-``, and fields go missing.  Normalizing
happens once at the boundary so the aggregation layer never re-checks.

A malformed record degrades (empty string, zero count) rather than
aborting the whole batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

_TEXT_FIELDS = (
    "upsc_exam_code",
    "exam_date",
    "exam_session",
    "centre_id",
    "sub_centre_id",
    "verification_mode",
)


def normalize_date(value: Any) -> str:
    """Rewrite an exam date to use ``-`` as separator ('' when missing)."""
    if value is None:
        return ""
    return str(value).replace("/", "-")


class StatsRecord(BaseModel):
    """Canonical admission record.  Immutable; equality is structural."""

    upsc_exam_code: str = ""
    exam_date: str = ""
    exam_session: str = ""
    centre_id: str = ""
    sub_centre_id: str = ""
    verification_mode: str = ""
    admit_count: int = 0

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    @field_validator("exam_date")
    @classmethod
    def _normalize_date(cls, v: str) -> str:
        return normalize_date(v)

    @field_validator("admit_count", mode="before")
    @classmethod
    def _coerce_count(cls, v: Any) -> int:
        if v is None or isinstance(v, bool):
            return 0
        try:
            count = int(float(v))
        except (TypeError, ValueError, OverflowError):
            return 0
        return max(count, 0)


def normalize_record(raw: Mapping[str, Any] | StatsRecord) -> StatsRecord:
    """Turn one raw upstream mapping into a canonical StatsRecord."""
    if isinstance(raw, StatsRecord):
        return raw
    return StatsRecord.model_validate(dict(raw))


def normalize_records(raws: Iterable[Any]) -> list[StatsRecord]:
    """Normalize a raw record sequence, preserving order.

    Entries that are not mappings at all are not records; they are
    skipped and logged.
    """
    records: list[StatsRecord] = []
    skipped = 0
    for raw in raws:
        if not isinstance(raw, (Mapping, StatsRecord)):
            skipped += 1
            continue
        records.append(normalize_record(raw))
    if skipped:
        logger.warning("Skipped %d non-object entries in stats payload", skipped)
    return records
