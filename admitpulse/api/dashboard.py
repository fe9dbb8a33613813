"""REST endpoints for dashboard snapshots.

Paths:
    GET  /api/dashboard            current view for the query's filter set
    POST /api/dashboard/refresh    force a refresh for the body's filter set
    GET  /api/dashboard/status     per-slot refresh status

Filter values use the dashboard's own labels; "All ..." or an empty
value means no restriction on that dimension.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from admitpulse.domain.filters import FilterSet
from admitpulse.domain.view import DashboardView
from admitpulse.services.dashboard import DashboardService
from admitpulse.store.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class FilterRequest(BaseModel):
    """Filter selection as the dashboard sends it."""

    exam_code: Optional[str] = None
    exam_date: Optional[str] = None
    session: Optional[str] = None
    centre_id: Optional[str] = None
    sub_centre_id: Optional[str] = None
    verification_mode: Optional[str] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_filter_set(self) -> FilterSet:
        return FilterSet.from_raw(self.model_dump())


def create_dashboard_router(service: DashboardService, store: SnapshotStore) -> APIRouter:
    """Factory that wires the dashboard endpoints to a service and store."""

    router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

    @router.get("", response_model=DashboardView)
    async def get_dashboard(
        examCode: Optional[str] = None,
        examDate: Optional[str] = None,
        session: Optional[str] = None,
        centreId: Optional[str] = None,
        subCentreId: Optional[str] = None,
        verificationMode: Optional[str] = None,
    ) -> DashboardView:
        filters = FilterRequest(
            exam_code=examCode,
            exam_date=examDate,
            session=session,
            centre_id=centreId,
            sub_centre_id=subCentreId,
            verification_mode=verificationMode,
        ).to_filter_set()
        return await service.current(filters)

    @router.post("/refresh", response_model=DashboardView)
    async def refresh_dashboard(request: Optional[FilterRequest] = None) -> DashboardView:
        filters = request.to_filter_set() if request is not None else FilterSet()
        logger.info("Manual refresh requested for %s", filters)
        return await service.refresh(filters)

    @router.get("/status")
    async def dashboard_status() -> dict[str, Any]:
        slots = await store.status()
        return {
            "filter_mode": service.filter_mode.value,
            "slots": slots,
            "count": len(slots),
        }

    return router
