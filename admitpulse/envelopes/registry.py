"""Envelope Registry: decodes a response body into raw records.

Adapters are tried in registration order; the first whose can_handle()
returns True wins.  No probing beyond that.  Fail fast if nothing
matches.
"""

from __future__ import annotations

import logging
from typing import Any

from admitpulse.envelopes.base import DecodedStats, EnvelopeAdapter
from admitpulse.envelopes.errors import UnrecognizedEnvelopeError, UpstreamErrorEnvelope
from admitpulse.envelopes.shapes import default_envelopes

logger = logging.getLogger(__name__)


class EnvelopeStats:
    """Per-envelope decode counts for observability."""

    __slots__ = ("envelope_name", "matched_count", "error_count")

    def __init__(self, envelope_name: str) -> None:
        self.envelope_name = envelope_name
        self.matched_count: int = 0
        self.error_count: int = 0

    def to_dict(self) -> dict:
        return {
            "envelope_name": self.envelope_name,
            "matched_count": self.matched_count,
            "error_count": self.error_count,
        }


class EnvelopeRegistry:
    """Ordered set of envelope adapters.

    Usage:
        registry = EnvelopeRegistry.with_defaults()
        decoded = registry.decode(response.json())
    """

    def __init__(self) -> None:
        self._adapters: list[EnvelopeAdapter] = []
        self._stats: dict[str, EnvelopeStats] = {}
        self._unrecognized: int = 0

    @classmethod
    def with_defaults(cls) -> EnvelopeRegistry:
        registry = cls()
        for adapter in default_envelopes():
            registry.register(adapter)
        return registry

    def register(self, adapter: EnvelopeAdapter) -> None:
        self._adapters.append(adapter)
        self._stats[adapter.envelope_name] = EnvelopeStats(adapter.envelope_name)
        logger.debug("Registered envelope: %s", adapter.envelope_name)

    def decode(self, body: Any) -> DecodedStats:
        """Locate the record array in a decoded JSON body.

        Raises:
            UpstreamErrorEnvelope: The body is an explicit error report.
            UnrecognizedEnvelopeError: No adapter recognised the body.
        """
        for adapter in self._adapters:
            if not adapter.can_handle(body):
                continue
            stats = self._stats[adapter.envelope_name]
            try:
                decoded = adapter.extract(body)
            except UpstreamErrorEnvelope:
                stats.error_count += 1
                raise
            stats.matched_count += 1
            logger.debug(
                "Envelope '%s' matched → %d record(s)",
                adapter.envelope_name,
                len(decoded.records),
            )
            return decoded

        self._unrecognized += 1
        if isinstance(body, dict):
            detail = f"keys: {sorted(body.keys())}"
        else:
            detail = f"type: {type(body).__name__}"
        raise UnrecognizedEnvelopeError(detail)

    @property
    def envelope_names(self) -> list[str]:
        return [a.envelope_name for a in self._adapters]

    @property
    def stats(self) -> list[dict]:
        return [s.to_dict() for s in self._stats.values()]

    @property
    def total_unrecognized(self) -> int:
        return self._unrecognized
