"""Blob storage package for the content service.

Provides the blob store backends plus the content-addressing helpers used
to name assets: streaming fingerprinting and key naming.

Examples:
    >>> from content_service.storage import MemoryBlobStore, fingerprint, fingerprinted_name
    >>> buffered = await fingerprint(b"hello", name="hello.txt")
    >>> fingerprinted_name("hello.txt", buffered.digest)
    'hello-2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824.txt'
"""

from content_service.storage.backends import (
    BlobStore,
    HttpBlobStore,
    LocalBlobStore,
    MemoryBlobStore,
)
from content_service.storage.hashing import BufferedAsset, fingerprint
from content_service.storage.naming import escape_content_id, fingerprinted_name, split_name

__all__ = [
    "BlobStore",
    "BufferedAsset",
    "HttpBlobStore",
    "LocalBlobStore",
    "MemoryBlobStore",
    "escape_content_id",
    "fingerprint",
    "fingerprinted_name",
    "split_name",
]
