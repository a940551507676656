"""In-process storage provider for local development and tests."""

from app.adapters.storage.base import StorageProvider, StoredObject


class InMemoryStorageProvider(StorageProvider):
    def __init__(self, base_url: str = "memory://") -> None:
        self._base_url = base_url
        self.objects: dict[str, tuple[str, bytes]] = {}

    def upload(self, content: bytes, *, folder: str, public_id: str, content_type: str) -> StoredObject:
        key = f"{folder}/{public_id}"
        self.objects[key] = (content_type, content)
        return StoredObject(public_id=key, url=f"{self._base_url}{key}", size=len(content))


__all__ = ["InMemoryStorageProvider"]
