"""Stable-View Merger.

Consumers treat object identity as "did this part change?".  Polling
recomputes every part from scratch, so without merging every refresh
would look like a change even when the numbers are identical.

``merge_snapshots`` is pure: the caller owns the single "currently
displayed" slot and threads it through.
"""

from __future__ import annotations

import logging

from admitpulse.domain.snapshot import SNAPSHOT_PARTS, DashboardSnapshot

logger = logging.getLogger(__name__)


def changed_parts(previous: DashboardSnapshot, incoming: DashboardSnapshot) -> list[str]:
    """Names of the sub-objects whose values differ."""
    return [
        part for part in SNAPSHOT_PARTS
        if getattr(previous, part) != getattr(incoming, part)
    ]


def merge_snapshots(
    previous: DashboardSnapshot | None,
    incoming: DashboardSnapshot,
) -> DashboardSnapshot:
    """Return the snapshot to display after *incoming* arrives.

    - no previous snapshot: *incoming* as-is
    - nothing changed: *previous* itself
    - otherwise: a snapshot holding *previous*'s objects for every
      unchanged part and *incoming*'s for the rest
    """
    if previous is None:
        return incoming

    changed = changed_parts(previous, incoming)
    if not changed:
        return previous

    logger.debug("Snapshot parts changed: %s", ", ".join(changed))
    # model_copy does not re-validate, so reused parts keep their identity
    return incoming.model_copy(
        update={
            part: getattr(previous, part)
            for part in SNAPSHOT_PARTS
            if part not in changed
        }
    )
