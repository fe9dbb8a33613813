"""Abstract base for response envelope adapters.

The statistics service has shipped several response shapes over time.
Each adapter recognises exactly one of them and pulls out the raw record
list plus the source's own timestamp, if it reports one.

Architectural rules:
    1. Adapters must NOT mutate the decoded response.
    2. can_handle() is a cheap structural check (type + key presence).
    3. extract() returns raw records untouched; normalizing is not an
       adapter's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DecodedStats:
    """Raw records located inside a response, with the envelope that held them."""

    records: list[Any] = field(default_factory=list)
    last_updated: str | None = None
    envelope: str = ""


class EnvelopeAdapter(ABC):
    """Recognises one response shape and extracts its record array."""

    @abstractmethod
    def can_handle(self, body: Any) -> bool:
        """Return True if *body* has this adapter's shape."""
        ...

    @abstractmethod
    def extract(self, body: Any) -> DecodedStats:
        """Pull the record array out of *body*.

        Raises:
            StatsShapeError: If the shape is an explicit error report.
        """
        ...

    @property
    @abstractmethod
    def envelope_name(self) -> str:
        """Short name of the shape, for logs and stats."""
        ...
