"""
Row Store Port.

Opaque request/response contract for the hosted relational backend.
The core never retries; failures are surfaced verbatim to the caller.
"""

from __future__ import annotations

from typing import Any, Protocol


class RowStorePort(Protocol):
    async def insert_row(self, table: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it as stored (including generated id)."""
        ...

    async def query_rows(self, table: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        """Return rows whose fields equal every filter value."""
        ...


class RowStoreError(Exception):
    """Raised when the row store rejects a request."""
