"""HTTP client for the remote statistics endpoint."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from admitpulse.envelopes.base import DecodedStats
from admitpulse.envelopes.registry import EnvelopeRegistry
from admitpulse.services.signing import sign_request

logger = logging.getLogger(__name__)


class StatsTransportError(RuntimeError):
    """Network error, timeout, non-success status or unparseable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class StatsClient:
    """Signed POST client for the statistics endpoint.

    Args:
        url: Full URL of the statistics endpoint.
        client_id / client_secret: Credentials for the ``auth_set`` block.
            Requests go out unsigned when either is missing.
        timeout_seconds: Upper bound for one request, connect included.
        envelopes: Response decoder; defaults to every known envelope.
        client: Shared httpx client, closed by aclose(); a short-lived
            one is opened per request when omitted.
    """

    def __init__(
        self,
        url: str,
        *,
        client_id: str | None = None,
        client_secret: str | None = None,
        timeout_seconds: float = 10.0,
        envelopes: EnvelopeRegistry | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = timeout_seconds
        self._envelopes = envelopes or EnvelopeRegistry.with_defaults()
        self._client = client

    @property
    def envelopes(self) -> EnvelopeRegistry:
        return self._envelopes

    def _body(self, payload: Mapping[str, Any] | None) -> dict[str, Any]:
        body: dict[str, Any] = dict(payload or {})
        if self._client_id and self._client_secret:
            auth = sign_request(self._client_id, self._client_secret)
            body["auth_set"] = auth.model_dump()
        return body

    async def _post(self, body: dict[str, Any]) -> httpx.Response:
        headers = {"Accept": "application/json"}
        if self._client is not None:
            return await self._client.post(self._url, json=body, headers=headers, timeout=self._timeout)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(self._url, json=body, headers=headers)

    async def fetch_raw(self, payload: Mapping[str, Any] | None = None) -> Any:
        """POST *payload* (plus auth_set) and return the decoded JSON body.

        Raises:
            StatsTransportError: On any transport-level failure.
        """
        if not self._url:
            raise StatsTransportError("Statistics URL is not configured")

        try:
            response = await self._post(self._body(payload))
        except httpx.TimeoutException as exc:
            raise StatsTransportError(f"Statistics request timed out after {self._timeout}s") from exc
        except httpx.HTTPError as exc:
            raise StatsTransportError(f"Failed to reach statistics service: {exc}") from exc

        if response.status_code >= 400:
            raise StatsTransportError(
                f"Dashboard API responded with status {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise StatsTransportError("Statistics service returned invalid JSON payload") from exc

    async def fetch(self, payload: Mapping[str, Any] | None = None) -> DecodedStats:
        """Fetch and locate the raw record array.

        Raises:
            StatsTransportError: On transport failure.
            StatsShapeError: If no record array could be located.
        """
        body = await self.fetch_raw(payload)
        decoded = self._envelopes.decode(body)
        logger.debug(
            "Fetched %d raw record(s) via '%s' envelope (filters=%s)",
            len(decoded.records),
            decoded.envelope,
            dict(payload or {}),
        )
        return decoded

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
