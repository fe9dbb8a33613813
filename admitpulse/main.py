"""admitpulse: exam-centre admission statistics for a live dashboard.

This is the application entry point.  It wires the StatsClient,
SnapshotStore, DashboardService, poller, REST routes, the dashboard
WebSocket and the signing relay together.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from admitpulse.api.dashboard import create_dashboard_router
from admitpulse.api.relay import create_relay_router
from admitpulse.api.ws_dashboard import DashboardManager, create_dashboard_ws_router
from admitpulse.config import Settings, settings
from admitpulse.foundation.clock import utc_now_iso
from admitpulse.services.dashboard import DashboardService, StatsSource
from admitpulse.services.poller import DashboardPoller
from admitpulse.services.stats_client import StatsClient
from admitpulse.store.snapshot_store import SnapshotStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(
    config: Settings | None = None,
    source: StatsSource | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        config: Settings to use; the environment-loaded ones by default.
        source: Replaces the StatsClient as the record source for the
            dashboard (the relay always uses the StatsClient).
    """
    config = config or settings

    # ── Upstream ─────────────────────────────────────────────────────────
    http_client = httpx.AsyncClient(timeout=config.request_timeout_seconds)
    client = StatsClient(
        config.stats_url,
        client_id=config.client_id,
        client_secret=config.client_secret,
        timeout_seconds=config.request_timeout_seconds,
        client=http_client,
    )
    if not config.stats_url:
        logger.warning("DASHBOARD_STATS_URL is not set; every refresh will fail")
    elif not config.signing_enabled:
        logger.warning("Client credentials not set; upstream requests go out unsigned")

    # ── State ────────────────────────────────────────────────────────────
    store = SnapshotStore(max_slots=config.max_tracked_filter_sets)
    service = DashboardService(
        source if source is not None else client,
        store,
        filter_mode=config.filter_mode,
        fetch_retries=config.fetch_retries,
        retry_delay_seconds=config.retry_delay_seconds,
        sort_table=config.sort_table,
    )
    manager = DashboardManager()
    service.add_listener(manager.on_view_changed)
    poller = DashboardPoller(
        service,
        interval_seconds=config.refresh_interval_seconds,
        watched=manager.subscribed_filters,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if config.poll_enabled:
            poller.start()
        try:
            yield
        finally:
            await poller.stop()
            await service.shutdown()
            await client.aclose()

    # ── App ──────────────────────────────────────────────────────────────
    app = FastAPI(
        title=config.app_name,
        description="Exam-centre admission statistics for a live dashboard",
        version="0.3.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = service
    app.state.store = store
    app.state.manager = manager
    app.state.poller = poller
    app.state.http_client = http_client

    # ── Routes ───────────────────────────────────────────────────────────
    app.include_router(create_dashboard_router(service, store))
    app.include_router(create_dashboard_ws_router(manager, service))
    app.include_router(create_relay_router(client))

    # ── Health ───────────────────────────────────────────────────────────

    @app.get("/api/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "timestamp": utc_now_iso(),
            "filter_mode": config.filter_mode.value,
            "tracked_filter_sets": await store.slot_count(),
            "dashboard_clients": manager.client_count,
            "poller_running": poller.running,
            "poll_cycles": poller.cycles,
            "envelopes": client.envelopes.stats,
        }

    return app


app = create_app()
