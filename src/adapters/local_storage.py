"""
Local Filesystem Object Store Adapter.

Implements the ObjectStorePort interface using the local filesystem.
Used for development and single-server deployments in place of the
hosted bucket storage.

Directory structure: {base_path}/{bucket}/{key} with a sibling
{key}.meta.json holding the content type.

Invariants:
- Keys once written cannot be overwritten
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from src.core.ports.storage import (
    KeyExistsError,
    KeyNotFoundError,
    StorageError,
    StoredObject,
)


META_SUFFIX = ".meta.json"


class LocalObjectStore:
    """
    Local filesystem implementation of ObjectStorePort.

    Example: bucket "content-images", key "u1/1700000000000-abc.png" ->
    {base_path}/content-images/u1/1700000000000-abc.png
    """

    def __init__(
        self,
        base_path: str | Path,
        public_base_url: str,
        *,
        create_dirs: bool = True,
    ) -> None:
        """
        Initialize local object store.

        Args:
            base_path: Root directory for storage
            public_base_url: URL prefix the files are served under
            create_dirs: Whether to create directories if they don't exist
        """
        self.base_path = Path(base_path)
        self.public_base_url = public_base_url.rstrip("/")

        if create_dirs:
            self.base_path.mkdir(parents=True, exist_ok=True)

    def _key_to_paths(self, bucket: str, key: str) -> tuple[Path, Path]:
        """Convert bucket and key to file paths (data and metadata)."""
        # Sanitize to prevent directory traversal
        safe_bucket = bucket.replace("..", "").strip("/")
        safe_key = key.replace("..", "").lstrip("/")
        data_path = self.base_path / safe_bucket / safe_key
        meta_path = data_path.with_name(data_path.name + META_SUFFIX)
        return data_path, meta_path

    def get_public_url(self, bucket: str, key: str) -> str:
        return f"{self.public_base_url}/{bucket}/{key}"

    async def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        *,
        cache_control: str = "3600",
    ) -> StoredObject:
        return await asyncio.to_thread(self._put, bucket, key, data, content_type, cache_control)

    def _put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        cache_control: str,
    ) -> StoredObject:
        data_path, meta_path = self._key_to_paths(bucket, key)

        # Immutability check: key must not exist
        if data_path.exists():
            raise KeyExistsError(key)

        try:
            data_path.parent.mkdir(parents=True, exist_ok=True)
            with open(data_path, "xb") as f:
                f.write(data)
            with open(meta_path, "w") as f:
                json.dump({"content_type": content_type, "cache_control": cache_control}, f)
        except FileExistsError as e:
            raise KeyExistsError(key) from e
        except OSError as e:
            raise StorageError(f"Could not write {key}: {e}") from e

        return StoredObject(
            key=key,
            bucket=bucket,
            size_bytes=len(data),
            content_type=content_type,
            public_url=self.get_public_url(bucket, key),
        )

    async def delete_object(self, bucket: str, key: str) -> None:
        await asyncio.to_thread(self._delete, bucket, key)

    def _delete(self, bucket: str, key: str) -> None:
        data_path, meta_path = self._key_to_paths(bucket, key)

        if not data_path.exists():
            raise KeyNotFoundError(key)

        try:
            data_path.unlink()
            if meta_path.exists():
                meta_path.unlink()
        except OSError as e:
            raise StorageError(f"Could not delete {key}: {e}") from e

    def read(self, bucket: str, key: str) -> tuple[bytes, str]:
        """Return (bytes, content type) for serving a stored object."""
        if key.endswith(META_SUFFIX):
            raise KeyNotFoundError(key)

        data_path, meta_path = self._key_to_paths(bucket, key)

        if not data_path.is_file():
            raise KeyNotFoundError(key)

        content_type = "application/octet-stream"
        if meta_path.exists():
            with open(meta_path) as f:
                content_type = json.load(f).get("content_type", content_type)

        with open(data_path, "rb") as f:
            return f.read(), content_type
