"""DashboardSnapshot: the complete computed view handed to the dashboard.

A snapshot is immutable once produced and is superseded, never mutated,
by the next one.  It is composed of independently comparable sub-objects
so the Stable-View Merger can reuse unchanged parts by reference.

Field names are snake_case in Python and camelCase on the wire
(``totalAdmits``, ``studentsPerCentre``), which is what the dashboard
frontend reads.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

_WIRE = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}


class Summary(BaseModel):
    total_admits: int = 0
    automated_logins: int = 0
    manual_logins: int = 0

    model_config = _WIRE


class LoginComparisonItem(BaseModel):
    centre_id: str
    automated: int = 0
    manual: int = 0

    model_config = _WIRE


class LoginTypeShare(BaseModel):
    """Independently rounded percentages; they may sum to 99 or 101."""

    automated_percentage: int = Field(0, ge=0, le=100)
    manual_percentage: int = Field(0, ge=0, le=100)

    model_config = _WIRE


class DistributionDatum(BaseModel):
    label: str
    value: int

    model_config = _WIRE


class TableRow(BaseModel):
    exam_code: str
    exam_date: str
    exam_session: str
    centre_id: str
    centre_label: str
    sub_centre_id: str
    verification_mode: str
    admit_count: int

    model_config = _WIRE


ALL_EXAM_CODES = "All Exam Codes"
ALL_DATES = "All Dates"
ALL_SESSIONS = "All Sessions"
ALL_CITIES = "All Cities"
ALL_SUB_CENTRES = "All Sub Centres"
ALL_MODES = "All Modes"


class FilterOptions(BaseModel):
    """Selectable values per dimension, each list led by its "all" label."""

    exam_codes: tuple[str, ...] = (ALL_EXAM_CODES,)
    exam_dates: tuple[str, ...] = (ALL_DATES,)
    sessions: tuple[str, ...] = (ALL_SESSIONS,)
    centre_ids: tuple[str, ...] = (ALL_CITIES,)
    sub_centre_ids: tuple[str, ...] = (ALL_SUB_CENTRES,)
    verification_modes: tuple[str, ...] = (ALL_MODES,)

    model_config = _WIRE


class DashboardSnapshot(BaseModel):
    summary: Summary = Field(default_factory=Summary)
    login_comparison: tuple[LoginComparisonItem, ...] = ()
    login_type_share: LoginTypeShare = Field(default_factory=LoginTypeShare)
    students_per_centre: tuple[DistributionDatum, ...] = ()
    students_per_course: tuple[DistributionDatum, ...] = ()
    students_per_session: tuple[DistributionDatum, ...] = ()
    table: tuple[TableRow, ...] = ()
    filters: FilterOptions = Field(default_factory=FilterOptions)
    last_updated: str

    model_config = _WIRE


# Sub-objects compared one by one by the Stable-View Merger.
SNAPSHOT_PARTS: tuple[str, ...] = tuple(DashboardSnapshot.model_fields)
