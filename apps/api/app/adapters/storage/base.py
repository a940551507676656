"""Object storage provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StoredObject:
    public_id: str
    url: str
    size: int


class StorageProvider(ABC):
    """Provider-neutral storage for uploaded document bytes."""

    @abstractmethod
    def upload(self, content: bytes, *, folder: str, public_id: str, content_type: str) -> StoredObject:
        """Persist ``content`` and return its public location."""


__all__ = ["StorageProvider", "StoredObject"]
