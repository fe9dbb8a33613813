"""Signing relay for the statistics endpoint.

Path: GET /api/dashboard-stats

Browsers cannot hold the shared secret, so the dashboard can fetch
through this relay instead: it signs the upstream call, passes the body
through untouched, and stamps ``fetched_at``.  Nothing is aggregated
here.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from admitpulse.foundation.clock import utc_now_iso
from admitpulse.services.stats_client import StatsClient, StatsTransportError

logger = logging.getLogger(__name__)


def create_relay_router(client: StatsClient) -> APIRouter:
    """Factory that wires the relay endpoint to a signed StatsClient."""

    router = APIRouter(prefix="/api", tags=["relay"])

    @router.get("/dashboard-stats")
    async def dashboard_stats() -> JSONResponse:
        try:
            body = await client.fetch_raw()
        except StatsTransportError as exc:
            logger.error("Relay error: %s", exc)
            return JSONResponse(
                status_code=502,
                content={
                    "status": "error",
                    "message": "Failed to fetch dashboard stats",
                    "details": str(exc),
                },
            )

        content: dict[str, Any]
        if isinstance(body, dict):
            content = {**body, "fetched_at": utc_now_iso()}
        else:
            content = {"data": body, "fetched_at": utc_now_iso()}
        return JSONResponse(content=content, headers={"Cache-Control": "no-store"})

    return router
