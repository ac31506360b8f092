"""Blob store backends."""

from content_service.storage.backends.base import BlobData, BlobStore
from content_service.storage.backends.http import HttpBlobStore
from content_service.storage.backends.local import LocalBlobStore
from content_service.storage.backends.memory import MemoryBlobStore, StoredBlob

__all__ = [
    "BlobData",
    "BlobStore",
    "HttpBlobStore",
    "LocalBlobStore",
    "MemoryBlobStore",
    "StoredBlob",
]
