"""FilterSet: the user's selection over the six record dimensions.

Each dimension holds an explicit Selection, either UNRESTRICTED or a
concrete value.  The dashboard's "All Cities" / "All Dates" labels are
translated into UNRESTRICTED once, in ``FilterSet.from_raw``; nothing
downstream looks at label strings.

A FilterSet is used one of two ways, never both for the same fetch:
    - ``to_payload()`` restricts the upstream query (server mode)
    - ``matches()`` restricts a full record set locally (client mode)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Optional

from pydantic import BaseModel

from admitpulse.domain.centres import extract_centre_code
from admitpulse.domain.exam_codes import extract_raw_exam_code
from admitpulse.domain.record import StatsRecord


def is_all_sentinel(value: Any) -> bool:
    """True for values meaning "no restriction": None, '', 'All ...'."""
    if value is None:
        return True
    text = str(value).strip()
    return not text or text.lower().startswith("all")


class Selection(BaseModel):
    """One dimension of a FilterSet.  ``value=None`` is Unrestricted."""

    value: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def of(cls, value: str) -> Selection:
        return cls(value=value)

    @classmethod
    def parse(cls, raw: Any, clean: Callable[[str], str] | None = None) -> Selection:
        if is_all_sentinel(raw):
            return UNRESTRICTED
        text = str(raw)
        if clean is not None:
            text = clean(text)
        return cls(value=text)

    @property
    def restricted(self) -> bool:
        return self.value is not None

    def admits(self, candidate: str) -> bool:
        """Exact, case-sensitive match; Unrestricted admits everything."""
        return self.value is None or candidate == self.value

    def __str__(self) -> str:
        return self.value if self.value is not None else "*"


UNRESTRICTED = Selection()


# (FilterSet attribute, StatsRecord field / payload key, camelCase query key, cleaner)
_DIMENSIONS: tuple[tuple[str, str, str, Callable[[str], str] | None], ...] = (
    ("exam_code", "upsc_exam_code", "examCode", extract_raw_exam_code),
    ("exam_date", "exam_date", "examDate", None),
    ("session", "exam_session", "session", None),
    ("centre_id", "centre_id", "centreId", extract_centre_code),
    ("sub_centre_id", "sub_centre_id", "subCentreId", None),
    ("verification_mode", "verification_mode", "verificationMode", None),
)


class FilterSet(BaseModel):
    """Immutable, hashable filter selection.  Keys a snapshot slot."""

    exam_code: Selection = UNRESTRICTED
    exam_date: Selection = UNRESTRICTED
    session: Selection = UNRESTRICTED
    centre_id: Selection = UNRESTRICTED
    sub_centre_id: Selection = UNRESTRICTED
    verification_mode: Selection = UNRESTRICTED

    model_config = {"frozen": True}

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None) -> FilterSet:
        """Build from dashboard-style values (camelCase or snake_case keys).

        Label decorations are undone here: ``"PT CMS-2024"`` selects exam
        code ``"CMS-2024"`` and ``"Delhi (08)"`` selects centre ``"08"``.
        """
        if not raw:
            return cls()
        selections: dict[str, Selection] = {}
        for attr, _, camel, clean in _DIMENSIONS:
            value = raw.get(camel, raw.get(attr))
            selections[attr] = Selection.parse(value, clean)
        return cls(**selections)

    @property
    def is_unrestricted(self) -> bool:
        return not any(getattr(self, attr).restricted for attr, *_ in _DIMENSIONS)

    def matches(self, record: StatsRecord) -> bool:
        """True iff *record* passes every dimension (logical AND)."""
        for attr, field, _, _ in _DIMENSIONS:
            if not getattr(self, attr).admits(getattr(record, field)):
                return False
        return True

    def to_payload(self) -> dict[str, str]:
        """Upstream query body.  Unrestricted dimensions are omitted."""
        payload: dict[str, str] = {}
        for attr, field, _, _ in _DIMENSIONS:
            selection: Selection = getattr(self, attr)
            if selection.restricted:
                payload[field] = selection.value
        return payload

    def to_query(self) -> dict[str, str]:
        """camelCase echo of the restricted dimensions, for API responses."""
        query: dict[str, str] = {}
        for attr, _, camel, _ in _DIMENSIONS:
            selection: Selection = getattr(self, attr)
            if selection.restricted:
                query[camel] = selection.value
        return query

    def __str__(self) -> str:
        restricted = self.to_query()
        if not restricted:
            return "FilterSet(all)"
        inner = ", ".join(f"{k}={v}" for k, v in restricted.items())
        return f"FilterSet({inner})"
