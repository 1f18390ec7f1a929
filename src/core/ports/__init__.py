# Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from src.core.ports.auth import AuthProviderPort
from src.core.ports.catalog import CatalogError, CatalogPort
from src.core.ports.clock import ClockPort
from src.core.ports.rows import RowStoreError, RowStorePort
from src.core.ports.storage import (
    KeyExistsError,
    KeyNotFoundError,
    ObjectStorePort,
    StorageError,
    StoredObject,
)

__all__ = [
    "AuthProviderPort",
    "CatalogError",
    "CatalogPort",
    "ClockPort",
    "KeyExistsError",
    "KeyNotFoundError",
    "ObjectStorePort",
    "RowStoreError",
    "RowStorePort",
    "StorageError",
    "StoredObject",
]
