"""Streaming SHA-256 fingerprinting for uploaded assets.

An asset stream is consumed exactly once. Each chunk updates the digest and
is spooled to a temporary file, so the same bytes can be republished
without re-reading the source. Small assets stay in memory; larger ones roll
over to disk once they pass ``spool_max_size``.

Examples:
    >>> from content_service.storage.hashing import fingerprint
    >>> with await fingerprint(upload_file, name="logo.png") as buffered:
    ...     buffered.digest
    ...     await store.put(key, buffered.chunks())
"""

from __future__ import annotations

import hashlib
import inspect
import logging
import tempfile
from typing import Any, AsyncIterator

from content_service.errors import FingerprintError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_SPOOL_MAX_SIZE = 8 * 1024 * 1024


async def iter_chunks(source: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield the bytes of an asset source chunk by chunk.

    Supported sources:
        - bytes / bytearray / memoryview
        - objects with a sync or async ``read(size)`` (files, UploadFile)
        - async iterables of bytes
        - sync iterables of bytes

    Args:
        source: The asset source.
        chunk_size: Read size for ``read()``-style sources.

    Yields:
        Non-empty byte chunks in source order.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        data = bytes(source)
        for start in range(0, len(data), chunk_size):
            yield data[start:start + chunk_size]
        return

    read = getattr(source, "read", None)
    if callable(read):
        while True:
            chunk = read(chunk_size)
            if inspect.isawaitable(chunk):
                chunk = await chunk
            if not chunk:
                return
            yield chunk

    elif hasattr(source, "__aiter__"):
        async for chunk in source:
            if chunk:
                yield chunk

    else:
        for chunk in source:
            if chunk:
                yield chunk


class BufferedAsset:
    """Digest plus a re-readable copy of an asset's bytes.

    Attributes:
        digest: SHA-256 hex digest of the full byte sequence
        size_bytes: Total number of bytes consumed
        chunk_size: Read size used when replaying the bytes
    """

    def __init__(
        self,
        digest: str,
        size_bytes: int,
        spool: tempfile.SpooledTemporaryFile,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.digest = digest
        self.size_bytes = size_bytes
        self.chunk_size = chunk_size
        self._spool = spool

    async def chunks(self) -> AsyncIterator[bytes]:
        """Replay the buffered bytes from the beginning."""
        self._spool.seek(0)
        while True:
            chunk = self._spool.read(self.chunk_size)
            if not chunk:
                return
            yield chunk

    def close(self) -> None:
        """Release the spool (and its temp file, if it rolled over)."""
        self._spool.close()

    def __enter__(self) -> "BufferedAsset":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


async def fingerprint(
    source: Any,
    name: str = "<stream>",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE,
) -> BufferedAsset:
    """Hash an asset stream while buffering its bytes for republishing.

    The digest depends only on the byte sequence, never on how the source
    happened to chunk it.

    Args:
        source: Asset source (see ``iter_chunks``).
        name: Asset name used in error messages.
        chunk_size: Read size for ``read()``-style sources.
        spool_max_size: Bytes held in memory before spooling to disk
            (0 keeps everything in memory).

    Returns:
        BufferedAsset owning the spooled bytes. Callers must close it.

    Raises:
        FingerprintError: If the source raises or yields non-bytes.
    """
    sha256 = hashlib.sha256()
    spool = tempfile.SpooledTemporaryFile(max_size=spool_max_size)
    size = 0

    try:
        async for chunk in iter_chunks(source, chunk_size):
            if not isinstance(chunk, (bytes, bytearray, memoryview)):
                raise TypeError(f"expected bytes chunk, got {type(chunk).__name__}")
            sha256.update(chunk)
            spool.write(chunk)
            size += len(chunk)
    except Exception as e:
        spool.close()
        raise FingerprintError(name, str(e) or type(e).__name__) from e

    digest = sha256.hexdigest()
    logger.debug(f"Fingerprinted [{name}]: {size} bytes, sha256 {digest}")
    return BufferedAsset(digest=digest, size_bytes=size, spool=spool, chunk_size=chunk_size)
