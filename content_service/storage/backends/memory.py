"""In-memory blob store for tests and throwaway development servers."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from content_service.errors import NotFoundError
from content_service.storage.backends.base import BlobData, BlobStore, iter_blob_data


@dataclass
class StoredBlob:
    """A single object held by MemoryBlobStore."""

    data: bytes
    content_type: str | None = None
    public: bool = False


class MemoryBlobStore(BlobStore):
    """Dictionary-backed blob store.

    Attributes:
        objects: Key -> StoredBlob for everything currently stored.
    """

    def __init__(self, container: str = "memory", public_base_url: str | None = None) -> None:
        self.container = container
        self.public_base_url = (public_base_url or f"memory://{container}").rstrip("/")
        self.objects: dict[str, StoredBlob] = {}

    async def put(
        self,
        key: str,
        data: BlobData,
        content_type: str | None = None,
        public: bool = False,
    ) -> None:
        chunks = [chunk async for chunk in iter_blob_data(data)]
        self.objects[key] = StoredBlob(b"".join(chunks), content_type, public)

    async def get(self, key: str) -> bytes:
        try:
            return self.objects[key].data
        except KeyError:
            raise NotFoundError(key, operation="blob.get") from None

    async def delete(self, key: str) -> None:
        self.objects.pop(key, None)

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{quote(key)}"
