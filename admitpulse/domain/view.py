"""DashboardView: a snapshot plus the refresh status around it."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from admitpulse.domain.snapshot import DashboardSnapshot


class DashboardView(BaseModel):
    """What the dashboard receives for one filter set.

    ``stale`` is set when the latest refresh failed and ``snapshot`` is the
    last good one (or the empty fallback); ``error`` says why.
    """

    filters: dict[str, str] = Field(default_factory=dict)
    snapshot: DashboardSnapshot
    stale: bool = False
    error: Optional[str] = None
    last_success_at: Optional[datetime] = None

    model_config = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}
