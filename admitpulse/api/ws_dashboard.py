"""Dashboard WebSocket: pushes snapshot updates to connected frontends.

Architecture:
    poller / REST  →  DashboardService.refresh()  →  SnapshotStore.publish()
                                                          ↓ (view changed)
    FE  ←  /ws/dashboard  ←  DashboardManager.on_view_changed()

Each client is subscribed to exactly one filter set (unrestricted on
connect).  A client switches by sending ``{"filters": {...}}``.  Pushes
happen only when the merged view for that filter set actually changed,
so an unchanged poll produces no traffic.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from admitpulse.domain.filters import FilterSet
from admitpulse.domain.view import DashboardView
from admitpulse.services.dashboard import DashboardService

logger = logging.getLogger(__name__)


def view_message(view: DashboardView) -> dict[str, Any]:
    return {"type": "dashboard_view", **view.model_dump(mode="json", by_alias=True)}


class DashboardManager:
    """Tracks connected dashboard clients and their filter subscriptions."""

    def __init__(self) -> None:
        self._clients: dict[WebSocket, FilterSet] = {}
        self._lock = asyncio.Lock()

    # ── Client management ────────────────────────────────────────────

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        logger.info("Dashboard client connected (%d subscribed)", len(self._clients))

    async def disconnect(self, ws: WebSocket) -> None:
        async with self._lock:
            self._clients.pop(ws, None)
        logger.info("Dashboard client disconnected (%d remaining)", len(self._clients))

    async def subscribe(self, ws: WebSocket, filters: FilterSet) -> None:
        """Point *ws* at *filters*; it receives pushes for that set only."""
        async with self._lock:
            self._clients[ws] = filters
        logger.debug("Dashboard client subscribed to %s", filters)

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def subscribed_filters(self) -> list[FilterSet]:
        """Distinct filter sets with at least one live subscriber."""
        return list(dict.fromkeys(self._clients.values()))

    # ── Broadcast ────────────────────────────────────────────────────

    async def on_view_changed(self, filters: FilterSet, view: DashboardView) -> None:
        """Push *view* to every client subscribed to *filters*."""
        async with self._lock:
            targets = [ws for ws, f in self._clients.items() if f == filters]
        if not targets:
            return

        message = json.dumps(view_message(view))
        dead: set[WebSocket] = set()
        for ws in targets:
            try:
                await ws.send_text(message)
            except Exception:
                dead.add(ws)

        if dead:
            async with self._lock:
                for ws in dead:
                    self._clients.pop(ws, None)
            logger.info("Removed %d dead dashboard client(s)", len(dead))


# ── WebSocket endpoint ───────────────────────────────────────────────────


def create_dashboard_ws_router(manager: DashboardManager, service: DashboardService) -> APIRouter:
    """Factory that creates the dashboard WebSocket endpoint."""

    router = APIRouter()

    @router.websocket("/ws/dashboard")
    async def dashboard_ws(websocket: WebSocket) -> None:
        await manager.connect(websocket)
        try:
            # Subscribe only after the first view is in hand, so a cold
            # refresh is not pushed and then sent a second time.
            filters = FilterSet()
            view = await service.current(filters)
            await manager.subscribe(websocket, filters)
            await websocket.send_json(view_message(view))

            while True:
                data = await websocket.receive_text()
                if data.strip().lower() == "ping":
                    await websocket.send_text("pong")
                    continue

                try:
                    message = json.loads(data)
                except ValueError:
                    await websocket.send_json({"type": "error", "detail": "Expected JSON or 'ping'"})
                    continue
                if not isinstance(message, dict) or not isinstance(message.get("filters", {}), dict):
                    await websocket.send_json({"type": "error", "detail": "Expected {\"filters\": {...}}"})
                    continue

                filters = FilterSet.from_raw(message.get("filters"))
                view = await service.current(filters)
                await manager.subscribe(websocket, filters)
                await websocket.send_json(view_message(view))
        except WebSocketDisconnect:
            logger.debug("Dashboard client closed the connection")
        finally:
            await manager.disconnect(websocket)

    return router
