"""Abstract base class for blob store backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncIterable, AsyncIterator, Union

BlobData = Union[bytes, AsyncIterable[bytes]]


async def iter_blob_data(data: BlobData) -> AsyncIterator[bytes]:
    """Yield a blob payload as chunks whether it is bytes or a stream."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        yield bytes(data)
        return
    async for chunk in data:
        yield chunk


class BlobStore(ABC):
    """Abstract blob store addressed by string keys within one container.

    Implementations must put, get and delete whole objects. ``get`` raises
    ``NotFoundError`` for missing keys; ``delete`` of a missing key is a
    no-op.

    Attributes:
        container: Container (bucket) this store reads and writes.
    """

    container: str

    @abstractmethod
    async def put(
        self,
        key: str,
        data: BlobData,
        content_type: str | None = None,
        public: bool = False,
    ) -> None:
        """Write an object, replacing any existing object under ``key``.

        Args:
            key: Object key.
            data: Bytes or an async stream of byte chunks.
            content_type: MIME type to record with the object.
            public: Whether the object should be publicly readable.
        """

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Read an object.

        Args:
            key: Object key.

        Returns:
            The object's bytes.

        Raises:
            NotFoundError: If no object exists under ``key``.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete an object. Deleting a missing key succeeds.

        Args:
            key: Object key.
        """

    @abstractmethod
    def public_url(self, key: str) -> str:
        """Return the URL clients use to fetch a public object."""

    async def close(self) -> None:
        """Release any held connections."""
