"""In-memory snapshot slots, one per active filter set.

Design notes:
    - An asyncio.Lock guards the slot mapping so the poller, REST handlers
      and websocket handlers never interleave a read-merge-write.
    - Each slot holds the snapshot currently on display for its filter
      set.  New snapshots go through merge_snapshots(); the slot, not a
      module global, is the "previous" side of the merge.
    - A failed refresh never clears a slot.  It records the error and the
      last good snapshot stays on display.
    - The mapping is a bounded LRU; the least recently touched filter set
      is forgotten first.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from datetime import datetime

from admitpulse.core.merger import merge_snapshots
from admitpulse.domain.filters import FilterSet
from admitpulse.domain.snapshot import DashboardSnapshot
from admitpulse.domain.view import DashboardView
from admitpulse.foundation.clock import utc_now

logger = logging.getLogger(__name__)


class SnapshotSlot:
    """Display state for one filter set.

    Mutated only while the SnapshotStore lock is held.
    """

    __slots__ = (
        "filters",
        "snapshot",
        "last_error",
        "last_success_at",
        "last_attempt_at",
    )

    def __init__(self, filters: FilterSet) -> None:
        self.filters = filters
        self.snapshot: DashboardSnapshot | None = None
        self.last_error: str | None = None
        self.last_success_at: datetime | None = None
        self.last_attempt_at: datetime | None = None

    @property
    def stale(self) -> bool:
        return self.last_error is not None

    def to_view(self) -> DashboardView:
        if self.snapshot is None:
            raise LookupError(f"No snapshot yet for {self.filters}")
        return DashboardView(
            filters=self.filters.to_query(),
            snapshot=self.snapshot,
            stale=self.stale,
            error=self.last_error,
            last_success_at=self.last_success_at,
        )

    def to_dict(self) -> dict:
        return {
            "filters": self.filters.to_query(),
            "has_snapshot": self.snapshot is not None,
            "total_admits": self.snapshot.summary.total_admits if self.snapshot else 0,
            "last_updated": self.snapshot.last_updated if self.snapshot else None,
            "last_error": self.last_error,
            "last_success_at": self.last_success_at.isoformat() if self.last_success_at else None,
            "last_attempt_at": self.last_attempt_at.isoformat() if self.last_attempt_at else None,
        }


class SnapshotStore:
    """Async-safe, bounded mapping of FilterSet → SnapshotSlot.

    Args:
        max_slots: How many filter sets to remember before evicting the
            least recently used one.
    """

    def __init__(self, max_slots: int = 32) -> None:
        if max_slots < 1:
            raise ValueError("max_slots must be at least 1")
        self._max_slots = max_slots
        self._lock = asyncio.Lock()
        self._slots: OrderedDict[FilterSet, SnapshotSlot] = OrderedDict()

    # ── Public API ───────────────────────────────────────────────────────

    async def publish(
        self,
        filters: FilterSet,
        incoming: DashboardSnapshot,
    ) -> tuple[DashboardView, bool]:
        """Merge a freshly computed snapshot into the slot for *filters*.

        Returns the resulting view and whether it differs from what was on
        display: a new snapshot object, or a stale slot that recovered.
        """
        async with self._lock:
            slot = self._touch(filters)
            previous = slot.snapshot
            recovered = slot.stale
            merged = merge_snapshots(previous, incoming)
            now = utc_now()
            slot.snapshot = merged
            slot.last_error = None
            slot.last_success_at = now
            slot.last_attempt_at = now
            changed = merged is not previous or recovered
            logger.debug("Published snapshot for %s (changed=%s)", filters, changed)
            return slot.to_view(), changed

    async def record_failure(
        self,
        filters: FilterSet,
        error: str,
        fallback: DashboardSnapshot,
    ) -> tuple[DashboardView, bool]:
        """Mark the latest refresh of *filters* as failed.

        The current snapshot stays; *fallback* is only installed when the
        slot has never held one.  Returns the view and whether the
        displayed snapshot object changed.
        """
        async with self._lock:
            slot = self._touch(filters)
            changed = slot.snapshot is None
            if changed:
                slot.snapshot = fallback
            slot.last_error = error
            slot.last_attempt_at = utc_now()
            return slot.to_view(), changed

    async def view(self, filters: FilterSet) -> DashboardView | None:
        """Current view for *filters*, or None if never refreshed."""
        async with self._lock:
            slot = self._slots.get(filters)
            if slot is None or slot.snapshot is None:
                return None
            self._slots.move_to_end(filters)
            return slot.to_view()

    async def tracked_filters(self) -> list[FilterSet]:
        async with self._lock:
            return list(self._slots.keys())

    async def discard(self, filters: FilterSet) -> None:
        async with self._lock:
            self._slots.pop(filters, None)

    async def status(self) -> list[dict]:
        async with self._lock:
            return [slot.to_dict() for slot in self._slots.values()]

    async def slot_count(self) -> int:
        async with self._lock:
            return len(self._slots)

    # ── Internal ─────────────────────────────────────────────────────────

    def _touch(self, filters: FilterSet) -> SnapshotSlot:
        slot = self._slots.get(filters)
        if slot is None:
            slot = SnapshotSlot(filters)
            self._slots[filters] = slot
            self._evict()
        else:
            self._slots.move_to_end(filters)
        return slot

    def _evict(self) -> None:
        while len(self._slots) > self._max_slots:
            evicted, _ = self._slots.popitem(last=False)
            logger.info("Evicted snapshot slot for %s", evicted)
