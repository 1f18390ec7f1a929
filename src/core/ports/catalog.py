"""
Mod Catalog Port.

Read-only contract for the third-party mod catalog used by the
resource browser.
"""

from __future__ import annotations

from typing import Any, Protocol


class CatalogPort(Protocol):
    async def search(self, params: dict[str, str]) -> dict[str, Any]:
        """Run a catalog search; returns the raw search response."""
        ...

    async def random(self, count: int) -> list[dict[str, Any]]:
        """Return a random selection of projects."""
        ...


class CatalogError(Exception):
    """Raised when the catalog responds with an error or is unreachable."""
