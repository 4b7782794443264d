"""
HTTP client for the incident API.

A thin wrapper over ``httpx.Client`` mirroring the router's contract. Error
responses are raised as IncidentAPIError carrying the server's messages.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import httpx

from ..config import get_logger

logger = get_logger("client.api")


class IncidentAPIError(Exception):
    """An HTTP error returned by the incident API, or a transport failure."""

    def __init__(self, status_code: int | None, messages: list[str]):
        self.status_code = status_code
        self.messages = messages
        super().__init__(", ".join(messages) if messages else f"Request failed with status {status_code}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @classmethod
    def from_response(cls, response: httpx.Response) -> IncidentAPIError:
        """Read ``errors`` (list) or ``error`` (string) from the body, whichever is present."""
        try:
            body = response.json()
        except ValueError:
            body = None

        messages: list[str] = []
        if isinstance(body, dict):
            if isinstance(body.get("errors"), list):
                messages = [str(item) for item in body["errors"]]
            elif body.get("error"):
                messages = [str(body["error"])]
        return cls(response.status_code, messages)


def _join(values: Iterable[str] | None) -> str | None:
    items = [value for value in (values or []) if value]
    return ",".join(items) if items else None


class IncidentAPIClient:
    """
    Client for the incident endpoints.

    Args:
        base_url: API root including the route prefix, e.g. ``http://localhost:5000/api``
        timeout: Request timeout in seconds
        transport: Optional httpx transport, used by tests
    """

    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.BaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> IncidentAPIClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Incident API unreachable", method=method, path=path, error=str(e))
            raise IncidentAPIError(None, [f"Could not reach incident API: {e}"]) from e

        if response.is_error:
            raise IncidentAPIError.from_response(response)
        return response.json()

    def list_incidents(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        services: Iterable[str] | None = None,
        severities: Iterable[str] | None = None,
        statuses: Iterable[str] | None = None,
        sort_by: str = "created_at",
        sort_order: str = "DESC",
    ) -> dict[str, Any]:
        """
        Fetch one page of incidents.

        Filter lists are sent comma-joined and omitted when empty.

        Returns:
            dict: ``{"incidents": [...], "pagination": {...}}``
        """
        params: dict[str, Any] = {"page": page, "limit": limit, "sortBy": sort_by, "sortOrder": sort_order}
        if search:
            params["search"] = search
        for name, values in (("services", services), ("severities", severities), ("statuses", statuses)):
            joined = _join(values)
            if joined:
                params[name] = joined

        return self._request("GET", "/incidents", params=params)

    def get_incident(self, incident_id: str) -> dict[str, Any]:
        return self._request("GET", f"/incidents/{incident_id}")

    def create_incident(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/incidents", json=data)

    def update_incident(self, incident_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return self._request("PATCH", f"/incidents/{incident_id}", json=data)
