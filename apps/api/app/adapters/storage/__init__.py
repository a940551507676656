"""Object storage adapters for uploaded documents."""

from .base import StorageProvider, StoredObject
from .memory_storage import InMemoryStorageProvider

__all__ = ["InMemoryStorageProvider", "StorageProvider", "StoredObject"]
