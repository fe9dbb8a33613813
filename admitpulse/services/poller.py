"""Background poller: refreshes watched filter sets on a fixed interval."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable

from admitpulse.domain.filters import FilterSet
from admitpulse.services.dashboard import DashboardService

logger = logging.getLogger(__name__)


class DashboardPoller:
    """Runs ``service.refresh`` for every watched filter set each interval.

    The unrestricted filter set is always watched.  ``watched`` supplies
    any others (the dashboard websocket passes its subscribers' sets).
    Refreshes run one after another, so a cycle never overlaps itself.
    """

    def __init__(
        self,
        service: DashboardService,
        interval_seconds: float = 60.0,
        watched: Callable[[], Iterable[FilterSet]] | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._service = service
        self._interval = interval_seconds
        self._watched = watched
        self._task: asyncio.Task[None] | None = None
        self.cycles: int = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def targets(self) -> list[FilterSet]:
        targets = [FilterSet()]
        if self._watched is not None:
            for filters in self._watched():
                if filters not in targets:
                    targets.append(filters)
        return targets

    async def run_once(self) -> None:
        for filters in self.targets():
            try:
                await self._service.refresh(filters)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.error("Poll refresh failed for %s: %s", filters, exc, exc_info=True)
        self.cycles += 1

    async def _loop(self) -> None:
        logger.info("Dashboard poller started (every %.0fs)", self._interval)
        while True:
            await self.run_once()
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Dashboard poller stopped after %d cycle(s)", self.cycles)
