"""
Mod catalog HTTP adapter.

Async client for the Modrinth v2 REST API implementing CatalogPort.

Usage:
    catalog = ModrinthCatalogClient()
    response = await catalog.search({"query": "sodium", "limit": "5"})
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.core.ports.catalog import CatalogError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.modrinth.com/v2"
DEFAULT_USER_AGENT = "forum-website/1.0 (contact@forum.com)"


class ModrinthCatalogClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize catalog client.

        Args:
            base_url: API root, without trailing slash
            user_agent: User-Agent header the catalog requires
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._transport = transport

    async def _get(self, path: str, params: dict[str, str]) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(path, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Catalog HTTP error on %s: %s", path, e.response.status_code)
            raise CatalogError(
                f"Catalog API error: {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except httpx.RequestError as e:
            logger.error("Catalog request error on %s: %s", path, e)
            raise CatalogError(f"Catalog unreachable: {e}") from e
        except ValueError as e:
            raise CatalogError(f"Catalog returned invalid JSON: {e}") from e

    async def search(self, params: dict[str, str]) -> dict[str, Any]:
        data = await self._get("/search", params)
        if not isinstance(data, dict):
            raise CatalogError("Unexpected search response shape")
        return data

    async def random(self, count: int) -> list[dict[str, Any]]:
        data = await self._get("/projects/random", {"count": str(count)})
        if not isinstance(data, list):
            raise CatalogError("Unexpected random projects response shape")
        return data
