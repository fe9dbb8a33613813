"""Concrete envelope adapters, one per known response shape.

    bare array      [ {...}, ... ]
    results         {"results": [...], "last_updated": ...}
    data_array      {"data": [...]}
    data_stats      {"data": {"stats": [...], "last_updated": ...}}
    stats           {"stats": [...]}
    legacy          {"status": "success", "data": {...}, "fetched_at": ...}
    error           {"success": false, "error": "..."}
"""

from __future__ import annotations

from typing import Any

from admitpulse.envelopes.base import DecodedStats, EnvelopeAdapter
from admitpulse.envelopes.errors import UpstreamErrorEnvelope


def _timestamp(*sources: Any) -> str | None:
    """First timestamp the source reports: last_updated, then fetched_at."""
    for key in ("last_updated", "fetched_at"):
        for source in sources:
            if isinstance(source, dict) and source.get(key):
                return str(source[key])
    return None


def _has_list(body: Any, key: str) -> bool:
    return isinstance(body, dict) and isinstance(body.get(key), list)


class BareArrayEnvelope(EnvelopeAdapter):
    @property
    def envelope_name(self) -> str:
        return "bare_array"

    def can_handle(self, body: Any) -> bool:
        return isinstance(body, list)

    def extract(self, body: Any) -> DecodedStats:
        return DecodedStats(records=list(body), envelope=self.envelope_name)


class ResultsEnvelope(EnvelopeAdapter):
    @property
    def envelope_name(self) -> str:
        return "results"

    def can_handle(self, body: Any) -> bool:
        return _has_list(body, "results")

    def extract(self, body: Any) -> DecodedStats:
        return DecodedStats(
            records=list(body["results"]),
            last_updated=_timestamp(body),
            envelope=self.envelope_name,
        )


class DataArrayEnvelope(EnvelopeAdapter):
    @property
    def envelope_name(self) -> str:
        return "data_array"

    def can_handle(self, body: Any) -> bool:
        return _has_list(body, "data")

    def extract(self, body: Any) -> DecodedStats:
        return DecodedStats(
            records=list(body["data"]),
            last_updated=_timestamp(body),
            envelope=self.envelope_name,
        )


class DataStatsEnvelope(EnvelopeAdapter):
    @property
    def envelope_name(self) -> str:
        return "data_stats"

    def can_handle(self, body: Any) -> bool:
        return isinstance(body, dict) and _has_list(body.get("data"), "stats")

    def extract(self, body: Any) -> DecodedStats:
        data = body["data"]
        return DecodedStats(
            records=list(data["stats"]),
            last_updated=_timestamp(body, data),
            envelope=self.envelope_name,
        )


class StatsEnvelope(EnvelopeAdapter):
    @property
    def envelope_name(self) -> str:
        return "stats"

    def can_handle(self, body: Any) -> bool:
        return _has_list(body, "stats")

    def extract(self, body: Any) -> DecodedStats:
        return DecodedStats(
            records=list(body["stats"]),
            last_updated=_timestamp(body),
            envelope=self.envelope_name,
        )


class LegacyEnvelope(EnvelopeAdapter):
    """Old proxy envelope.  A success with no stats list means no records."""

    @property
    def envelope_name(self) -> str:
        return "legacy"

    def can_handle(self, body: Any) -> bool:
        return isinstance(body, dict) and body.get("status") == "success"

    def extract(self, body: Any) -> DecodedStats:
        data = body.get("data")
        stats = data.get("stats") if isinstance(data, dict) else None
        return DecodedStats(
            records=list(stats) if isinstance(stats, list) else [],
            last_updated=_timestamp(body, data),
            envelope=self.envelope_name,
        )


class ErrorEnvelope(EnvelopeAdapter):
    """``{"success": false}`` from the service, or an error from the relay."""

    @property
    def envelope_name(self) -> str:
        return "error"

    def can_handle(self, body: Any) -> bool:
        return isinstance(body, dict) and (
            body.get("success") is False or body.get("status") == "error"
        )

    def extract(self, body: Any) -> DecodedStats:
        reason = body.get("error") or body.get("message") or "Dashboard API returned an error"
        raise UpstreamErrorEnvelope(str(reason))


def default_envelopes() -> list[EnvelopeAdapter]:
    """All known shapes in priority order."""
    return [
        BareArrayEnvelope(),
        ResultsEnvelope(),
        DataArrayEnvelope(),
        DataStatsEnvelope(),
        StatsEnvelope(),
        LegacyEnvelope(),
        ErrorEnvelope(),
    ]
