"""
In-memory Row Store Adapter.

Stands in for the hosted relational backend in development and tests.
Rows get a generated string id and a created_at timestamp.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from src.core.ports.rows import RowStoreError

logger = logging.getLogger(__name__)


class InMemoryRowStore:
    def __init__(self, tables: list[str] | None = None) -> None:
        # None means any table name is accepted
        self._allowed = set(tables) if tables is not None else None
        self._tables: dict[str, list[dict[str, Any]]] = {}

    def _check_table(self, table: str) -> None:
        if self._allowed is not None and table not in self._allowed:
            raise RowStoreError(f'relation "{table}" does not exist')

    async def insert_row(self, table: str, fields: dict[str, Any]) -> dict[str, Any]:
        self._check_table(table)
        row = {
            "id": str(uuid4()),
            "created_at": datetime.now(UTC).isoformat(),
            **fields,
        }
        self._tables.setdefault(table, []).append(row)
        logger.debug("Inserted row %s into %s", row["id"], table)
        return dict(row)

    async def query_rows(self, table: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        self._check_table(table)
        return [
            dict(row)
            for row in self._tables.get(table, [])
            if all(row.get(name) == value for name, value in filters.items())
        ]
