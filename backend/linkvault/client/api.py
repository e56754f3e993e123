"""HTTP client for the LinkVault REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for any non-2xx response or transport failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class LinkVaultClient:
    """Thin async wrapper over the LinkVault endpoints.

    Pass ``transport`` to route requests somewhere other than the network
    (an ``httpx.MockTransport`` in tests, an ``httpx.ASGITransport`` to talk
    to the app in-process).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> LinkVaultClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def list_links(self, params: dict[str, str] | None = None) -> list[dict[str, Any]]:
        return await self._request("GET", "/links", "Failed to fetch links", params=params)

    async def get_link(self, link_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/links/{link_id}", "Failed to fetch link")

    async def create_link(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/links", "Failed to add link", json=data)

    async def update_link(self, link_id: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request(
            "PATCH", f"/links/{link_id}", "Failed to update link", json=data
        )

    async def delete_link(self, link_id: str) -> None:
        await self._request("DELETE", f"/links/{link_id}", "Failed to delete link")

    async def list_tags(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/tags", "Failed to fetch tags")

    async def health(self) -> dict[str, Any]:
        return await self._request("GET", "/health", "Health check failed")

    async def _request(self, method: str, path: str, failure: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(f"{failure}: {exc}") from exc

        if response.is_error:
            raise ApiError(
                f"{failure}: {_error_text(response)}",
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return None
        return response.json()


def _error_text(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase
