"""DashboardService: fetch → normalize → filter → aggregate → merge.

One refresh cycle per call.  Only the fetch suspends; everything after
it is synchronous computation followed by a single publish into the
SnapshotStore.

Failure policy:
    Transport and shape failures end the cycle.  The last good snapshot
    stays on display and the slot is flagged stale with the error text;
    a filter set that never loaded gets the empty snapshot instead.
    Nothing is raised to the caller.

Overlap policy:
    At most one fetch runs per filter set.  Starting a refresh cancels
    the one in flight, and callers of the cancelled refresh receive the
    newer refresh's result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from admitpulse.core.aggregation import build_snapshot, empty_snapshot
from admitpulse.domain.enums import FilterMode
from admitpulse.domain.filters import FilterSet
from admitpulse.domain.record import normalize_records
from admitpulse.domain.snapshot import DashboardSnapshot
from admitpulse.domain.view import DashboardView
from admitpulse.envelopes.base import DecodedStats
from admitpulse.envelopes.errors import StatsShapeError
from admitpulse.services.stats_client import StatsTransportError
from admitpulse.store.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)

ViewListener = Callable[[FilterSet, DashboardView], Awaitable[None]]


class StatsSource(Protocol):
    async def fetch(self, payload: dict | None = None) -> DecodedStats: ...


class DashboardService:
    """Owns the refresh cycle for every tracked filter set.

    Args:
        source: Where raw records come from (a StatsClient in production).
        store: Snapshot slots; the "previous" side of every merge.
        filter_mode: SERVER sends the filter payload upstream, CLIENT
            filters the full record set locally.  Never both.
        fetch_retries: Extra attempts after a transport failure.
        retry_delay_seconds: Pause between attempts.
        sort_table: Apply display ordering to table rows.
    """

    def __init__(
        self,
        source: StatsSource,
        store: SnapshotStore,
        *,
        filter_mode: FilterMode = FilterMode.SERVER,
        fetch_retries: int = 2,
        retry_delay_seconds: float = 0.5,
        sort_table: bool = True,
    ) -> None:
        self._source = source
        self._store = store
        self._filter_mode = filter_mode
        self._fetch_retries = max(fetch_retries, 0)
        self._retry_delay = retry_delay_seconds
        self._sort_table = sort_table
        self._inflight: dict[FilterSet, asyncio.Task[DashboardView]] = {}
        self._listeners: list[ViewListener] = []

    @property
    def filter_mode(self) -> FilterMode:
        return self._filter_mode

    def add_listener(self, listener: ViewListener) -> None:
        """Call *listener* when a filter set's view changes or its refresh fails."""
        self._listeners.append(listener)

    # ── Public API ───────────────────────────────────────────────────────

    async def current(self, filters: FilterSet | None = None) -> DashboardView:
        """The displayed view for *filters*, refreshing if there is none yet."""
        if filters is None:
            filters = FilterSet()
        view = await self._store.view(filters)
        if view is not None:
            return view
        return await self.refresh(filters)

    async def refresh(self, filters: FilterSet | None = None) -> DashboardView:
        """Run one refresh cycle for *filters* and return the resulting view."""
        if filters is None:
            filters = FilterSet()

        running = self._inflight.get(filters)
        if running is not None and not running.done():
            logger.debug("Cancelling in-flight refresh for %s", filters)
            running.cancel()

        task = asyncio.create_task(self._run_cycle(filters))
        self._inflight[filters] = task
        try:
            return await self._await_latest(filters, task)
        finally:
            if self._inflight.get(filters) is task:
                del self._inflight[filters]

    async def shutdown(self) -> None:
        """Cancel every in-flight refresh."""
        tasks = [t for t in self._inflight.values() if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._inflight.clear()

    def build(self, filters: FilterSet, decoded: DecodedStats) -> DashboardSnapshot:
        """Turn decoded upstream records into a snapshot for *filters*."""
        records = normalize_records(decoded.records)
        if self._filter_mode is FilterMode.CLIENT:
            in_scope = [r for r in records if filters.matches(r)]
        else:
            in_scope = records
        return build_snapshot(
            in_scope,
            available=records,
            last_updated=decoded.last_updated,
            sort_table=self._sort_table,
        )

    # ── Refresh cycle ────────────────────────────────────────────────────

    async def _await_latest(
        self,
        filters: FilterSet,
        task: asyncio.Task[DashboardView],
    ) -> DashboardView:
        # asyncio.wait does not propagate the task's own cancellation, so a
        # superseded task can be told apart from the caller being cancelled.
        # A cancelled caller only cancels its own task, never one it adopted.
        own = task
        while True:
            try:
                await asyncio.wait({task})
            except asyncio.CancelledError:
                own.cancel()
                raise
            if not task.cancelled():
                return task.result()

            newer = self._inflight.get(filters)
            if newer is None or newer is task:
                view = await self._store.view(filters)
                return view if view is not None else DashboardView(
                    filters=filters.to_query(),
                    snapshot=empty_snapshot(),
                    stale=True,
                    error="Refresh cancelled",
                )
            task = newer

    async def _run_cycle(self, filters: FilterSet) -> DashboardView:
        payload = filters.to_payload() if self._filter_mode is FilterMode.SERVER else {}
        try:
            decoded = await self._fetch(payload)
            snapshot = self.build(filters, decoded)
        except (StatsTransportError, StatsShapeError) as exc:
            logger.warning("Refresh failed for %s: %s", filters, exc)
            return await self._fail(filters, str(exc))
        except Exception as exc:
            logger.error("Unexpected refresh failure for %s: %s", filters, exc, exc_info=True)
            return await self._fail(filters, f"Unexpected error: {exc}")

        view, changed = await self._store.publish(filters, snapshot)
        logger.info(
            "Refreshed %s: %d admits over %d row(s)%s",
            filters,
            view.snapshot.summary.total_admits,
            len(view.snapshot.table),
            "" if changed else " (unchanged)",
        )
        if changed:
            await self._notify(filters, view)
        return view

    async def _fetch(self, payload: dict) -> DecodedStats:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._fetch_retries + 1),
            wait=wait_fixed(self._retry_delay),
            retry=retry_if_exception_type(StatsTransportError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                decoded = await self._source.fetch(payload)
        return decoded

    async def _fail(self, filters: FilterSet, error: str) -> DashboardView:
        view, _ = await self._store.record_failure(filters, error, empty_snapshot())
        await self._notify(filters, view)
        return view

    async def _notify(self, filters: FilterSet, view: DashboardView) -> None:
        for listener in self._listeners:
            try:
                await listener(filters, view)
            except Exception as exc:
                logger.error("Dashboard listener failed: %s", exc, exc_info=True)
