"""Envelope coordinator: dual writes across the blob store and search index.

The blob store holds each envelope verbatim; the search index holds its
projection. The two backends fail independently and share no transaction:

    store    -> blob.put     || index.upsert
    retrieve -> blob.get     || assets.enumerate
    delete   -> blob.delete  || index.delete

Each call waits for both branches. If either fails the call fails with the
first error, and the branch that succeeded is left in place, so the backends
can disagree until the caller retries the operation.

Examples:
    >>> coordinator = EnvelopeCoordinator(content_store, index, asset_directory)
    >>> await coordinator.store("post-42", {"title": "Hi", "body": "..."})
    >>> envelope = await coordinator.retrieve("post-42")
    >>> envelope["assets"]
    {'logo': 'https://cdn.example.com/logo-ab12....png'}
    >>> await coordinator.delete("post-42")

Tests:
    - tests/unit/test_core/test_coordinator.py
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Awaitable

from content_service.core.forkjoin import gather_settled
from content_service.errors import CorruptEnvelopeError, NotFoundError
from content_service.index.base import AssetDirectory, SearchIndex
from content_service.index.documents import IndexDocument
from content_service.storage.backends.base import BlobStore
from content_service.storage.naming import escape_content_id

logger = logging.getLogger(__name__)

ENVELOPE_CONTENT_TYPE = "application/json"


def encode_envelope(envelope: dict[str, Any]) -> bytes:
    """Serialize an envelope to UTF-8 JSON.

    Raises:
        ValueError: If the envelope is not a JSON object or not serializable.
    """
    if not isinstance(envelope, dict):
        raise ValueError(f"Envelope must be a JSON object, got {type(envelope).__name__}")
    try:
        text = json.dumps(envelope, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except TypeError as e:
        raise ValueError(f"Envelope is not JSON serializable: {e}") from e
    return text.encode("utf-8")


def decode_envelope(content_id: str, raw: bytes) -> dict[str, Any]:
    """Parse stored envelope bytes.

    Raises:
        CorruptEnvelopeError: If the bytes are not a UTF-8 JSON object.
    """
    try:
        envelope = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise CorruptEnvelopeError(content_id, f"not UTF-8 ({e.reason})") from e
    except json.JSONDecodeError as e:
        raise CorruptEnvelopeError(content_id, f"invalid JSON ({e.msg})") from e

    if not isinstance(envelope, dict):
        raise CorruptEnvelopeError(content_id, f"expected an object, got {type(envelope).__name__}")
    return envelope


async def _ignore_missing(awaitable: Awaitable[Any]) -> None:
    try:
        await awaitable
    except NotFoundError as e:
        logger.debug(f"Ignoring missing object during delete: {e}")


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class EnvelopeCoordinator:
    """Stores, retrieves and deletes envelopes across two backends.

    Attributes:
        content_store: Blob store holding full envelopes
        index: Search index holding envelope projections
        asset_directory: Named asset URLs injected on retrieval (optional)
        timeout: Per-backend-call deadline in seconds (None disables)
    """

    def __init__(
        self,
        content_store: BlobStore,
        index: SearchIndex,
        asset_directory: AssetDirectory | None = None,
        timeout: float | None = None,
    ) -> None:
        self.content_store = content_store
        self.index = index
        self.asset_directory = asset_directory
        self.timeout = timeout

    async def store(self, content_id: str, envelope: dict[str, Any]) -> None:
        """Write an envelope to the blob store and its projection to the index.

        Args:
            content_id: Caller-supplied content ID.
            envelope: The envelope, stored exactly as given.

        Raises:
            ValueError: If the content ID or envelope is invalid (nothing written).
            ContentServiceError: First backend failure; the other write is kept.
        """
        key = escape_content_id(content_id)
        payload = encode_envelope(envelope)
        document = IndexDocument.from_envelope(content_id, envelope)
        start = time.perf_counter()

        logger.debug(f"Storing content ID [{content_id}] ({len(payload)} bytes)")

        await gather_settled(
            {
                "blob.put": self.content_store.put(
                    key, payload, content_type=ENVELOPE_CONTENT_TYPE
                ),
                "index.upsert": self.index.upsert(document),
            },
            timeout=self.timeout,
        )

        logger.info(f"Stored content ID [{content_id}] in {_elapsed_ms(start)}ms")

    async def retrieve(self, content_id: str) -> dict[str, Any]:
        """Read an envelope and inject the current named asset URLs.

        Args:
            content_id: Content ID to read.

        Returns:
            The stored envelope with an ``assets`` mapping added.

        Raises:
            NotFoundError: If nothing is stored under the content ID.
            CorruptEnvelopeError: If the stored bytes are not a JSON object.
            ContentServiceError: For any other backend failure.
        """
        key = escape_content_id(content_id)
        start = time.perf_counter()

        logger.debug(f"Retrieving content ID [{content_id}]")

        results = await gather_settled(
            {
                "blob.get": self.content_store.get(key),
                "assets.enumerate": self._named_assets(),
            },
            timeout=self.timeout,
        )

        envelope = decode_envelope(content_id, results["blob.get"])
        envelope["assets"] = results["assets.enumerate"]

        logger.info(
            f"Retrieved content ID [{content_id}] with {len(envelope['assets'])} "
            f"asset variables in {_elapsed_ms(start)}ms"
        )
        return envelope

    async def delete(self, content_id: str) -> None:
        """Delete an envelope from the blob store and the index.

        Missing objects on either side are not errors, so deleting twice
        succeeds.

        Raises:
            ContentServiceError: First hard backend failure.
        """
        key = escape_content_id(content_id)
        start = time.perf_counter()

        logger.debug(f"Deleting content ID [{content_id}]")

        await gather_settled(
            {
                "blob.delete": _ignore_missing(self.content_store.delete(key)),
                "index.delete": _ignore_missing(self.index.delete(content_id)),
            },
            timeout=self.timeout,
        )

        logger.info(f"Deleted content ID [{content_id}] in {_elapsed_ms(start)}ms")

    async def _named_assets(self) -> dict[str, str]:
        if self.asset_directory is None:
            return {}
        return await self.asset_directory.enumerate_named()
