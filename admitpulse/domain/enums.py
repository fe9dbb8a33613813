"""Controlled enumerations for the admitpulse domain."""

from __future__ import annotations

from enum import Enum


class VerificationMode(str, Enum):
    """How a candidate's admission was verified at the centre."""

    AUTOMATED = "A"
    MANUAL = "M"


class FilterMode(str, Enum):
    """Where the active filter set is applied.

    SERVER: the filter payload is sent upstream and the returned records
            are trusted to be in scope.
    CLIENT: the full record set is fetched and filtered locally.
    """

    SERVER = "server"
    CLIENT = "client"
