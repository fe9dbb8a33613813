"""Request signing for the statistics service.

The service authenticates a caller by a digest over its shared secret,
client id and the current Unix time.  The digest is hex SHA-256 of the
three values concatenated in that order, which is what the service
recomputes on its side.
"""

from __future__ import annotations

import hashlib
import time
from typing import Optional

from pydantic import BaseModel


class AuthSet(BaseModel):
    """The ``auth_set`` block attached to every signed request."""

    client_id: str
    hmac: str
    ts: str

    model_config = {"frozen": True}


def compute_signature(client_secret: str, client_id: str, ts: int) -> str:
    source = f"{client_secret}{client_id}{ts}"
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def sign_request(client_id: str, client_secret: str, ts: Optional[int] = None) -> AuthSet:
    """Build an AuthSet for *client_id*, stamped now unless *ts* is given."""
    if not client_id or not client_secret:
        raise ValueError("client_id and client_secret are required for signing")
    stamp = int(time.time()) if ts is None else int(ts)
    return AuthSet(
        client_id=client_id,
        hmac=compute_signature(client_secret, client_id, stamp),
        ts=str(stamp),
    )
