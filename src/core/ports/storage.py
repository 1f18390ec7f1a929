"""
Object Storage Port.

Protocol-based interface for the hosted object store that keeps content
images and avatars. Implementations: local filesystem (development),
hosted bucket storage (production, external).

Invariants:
- Keys once written cannot be overwritten; a duplicate key is an error
- Deletion is best-effort from the caller's point of view
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass
class StoredObject:
    """Metadata for a stored object."""

    key: str
    bucket: str
    size_bytes: int
    content_type: str
    public_url: str


class ObjectStorePort(Protocol):
    """
    Object storage port interface.

    Buckets separate avatars from content images; keys are relative to
    their bucket.
    """

    async def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        *,
        cache_control: str = "3600",
    ) -> StoredObject:
        """
        Store object bytes under the given key.

        Raises:
            KeyExistsError: If key already exists in the bucket
            StorageError: If the store rejects the write (quota, permissions)
        """
        ...

    async def delete_object(self, bucket: str, key: str) -> None:
        """
        Delete object by key.

        Raises:
            KeyNotFoundError: If key doesn't exist
            StorageError: If the store rejects the delete
        """
        ...

    def get_public_url(self, bucket: str, key: str) -> str:
        """Get the publicly resolvable URL for a key."""
        ...


class StorageError(Exception):
    """Base class for storage errors."""


class KeyExistsError(StorageError):
    """Raised when attempting to write to an existing key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"The resource already exists: {key}")


class KeyNotFoundError(StorageError):
    """Raised when key doesn't exist."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key not found: {key}")
