"""Shape failures: the response parsed, but held no usable record array."""

from __future__ import annotations


class StatsShapeError(Exception):
    """Base class for response-shape failures."""


class UnrecognizedEnvelopeError(StatsShapeError):
    """No known envelope matched the response."""

    def __init__(self, detail: str = "") -> None:
        message = "Dashboard API response did not contain stats data"
        super().__init__(f"{message} ({detail})" if detail else message)


class UpstreamErrorEnvelope(StatsShapeError):
    """The service answered with an explicit error envelope."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)
