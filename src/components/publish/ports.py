"""Publish component port definitions - protocols for dependencies."""

from typing import Any, Protocol


class PersistCallback(Protocol):
    """Caller-supplied persistence step; raising signals a rejected publish."""

    async def __call__(self, payload: dict[str, Any]) -> Any: ...
