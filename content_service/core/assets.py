"""Asset pipeline: fingerprint and publish uploaded assets.

Each asset is hashed while its bytes are buffered, named after its digest,
and uploaded under that name with public-read access. Assets in a batch are
processed concurrently and independently, but the batch is all-or-nothing:
any failure fails the whole call and no summary is returned.

Examples:
    >>> pipeline = AssetPipeline(asset_store)
    >>> summary = await pipeline.accept([
    ...     Asset("logo.png", "image/png", open("logo.png", "rb")),
    ... ])
    >>> summary
    {'logo.png': 'https://cdn.example.com/logo-9f86d0....png'}

Tests:
    - tests/unit/test_core/test_assets.py
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from dataclasses import dataclass
from typing import Any, Iterable

from pydantic import BaseModel, Field

from content_service.core.forkjoin import gather_settled
from content_service.errors import ContentServiceError, FingerprintError, PublishError
from content_service.index.base import AssetDirectory
from content_service.storage.backends.base import BlobStore
from content_service.storage.hashing import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_SPOOL_MAX_SIZE,
    BufferedAsset,
    fingerprint,
)
from content_service.storage.naming import fingerprinted_name, split_name

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class Asset:
    """An uploaded asset.

    Attributes:
        original_name: File name supplied by the uploader
        content_type: Declared MIME type (guessed from the name if missing)
        stream: bytes, an iterable of bytes, or an object with read(size)
    """

    original_name: str
    content_type: str | None
    stream: Any


class AssetRecord(BaseModel):
    """Result of fingerprinting and publishing one asset."""

    original_name: str
    fingerprinted_name: str
    content_type: str
    digest: str = Field(description="SHA-256 hex digest of the asset bytes")
    size_bytes: int = 0
    public_url: str


class AssetPipeline:
    """Fingerprints and publishes batches of assets.

    Attributes:
        asset_store: Blob store that receives published assets
        asset_directory: Directory that named uploads are registered in
        timeout: Deadline in seconds for each upload (None disables)
        chunk_size: Read size when streaming uploads
        spool_max_size: Bytes buffered in memory before spooling to disk
    """

    def __init__(
        self,
        asset_store: BlobStore,
        asset_directory: AssetDirectory | None = None,
        timeout: float | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        spool_max_size: int = DEFAULT_SPOOL_MAX_SIZE,
    ) -> None:
        self.asset_store = asset_store
        self.asset_directory = asset_directory
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.spool_max_size = spool_max_size

    async def accept(self, assets: Iterable[Asset], named: bool = False) -> dict[str, str]:
        """Fingerprint and publish a batch of assets.

        Args:
            assets: Uploaded assets.
            named: Also register each asset's original name in the asset
                directory so it is injected into retrieved envelopes.

        Returns:
            Mapping of original name -> public URL.

        Raises:
            FingerprintError: If any asset could not be read.
            PublishError: If any asset could not be uploaded.
        """
        assets = list(assets)
        logger.debug(f"Processing {len(assets)} uploaded assets")

        results = await gather_settled(
            {
                f"asset[{position}]:{asset.original_name}": self.process(asset)
                for position, asset in enumerate(assets)
            }
        )
        records: list[AssetRecord] = list(results.values())

        if named:
            await self._register(records)

        summary = {record.original_name: record.public_url for record in records}
        logger.info(f"All {len(records)} assets have been processed successfully")
        return summary

    async def process(self, asset: Asset) -> AssetRecord:
        """Fingerprint, name and publish a single asset."""
        logger.debug(f"Processing uploaded asset [{asset.original_name}]")

        try:
            split_name(asset.original_name)
        except ValueError as e:
            raise FingerprintError(asset.original_name or "<unnamed>", str(e)) from e

        buffered = await fingerprint(
            asset.stream,
            name=asset.original_name,
            chunk_size=self.chunk_size,
            spool_max_size=self.spool_max_size,
        )
        with buffered:
            name = fingerprinted_name(asset.original_name, buffered.digest)
            content_type = (
                asset.content_type
                or mimetypes.guess_type(asset.original_name)[0]
                or DEFAULT_CONTENT_TYPE
            )
            logger.debug(f"Fingerprinted asset [{asset.original_name}] as [{name}]")
            await self._publish(asset, name, content_type, buffered)

        return AssetRecord(
            original_name=asset.original_name,
            fingerprinted_name=name,
            content_type=content_type,
            digest=buffered.digest,
            size_bytes=buffered.size_bytes,
            public_url=self.asset_store.public_url(name),
        )

    async def _publish(
        self,
        asset: Asset,
        name: str,
        content_type: str,
        buffered: BufferedAsset,
    ) -> None:
        upload = self.asset_store.put(
            name,
            buffered.chunks(),
            content_type=content_type,
            public=True,
        )
        try:
            if self.timeout is None:
                await upload
            else:
                await asyncio.wait_for(upload, self.timeout)
        except asyncio.TimeoutError:
            raise PublishError(
                asset.original_name, f"upload timed out after {self.timeout}s"
            ) from None
        except ContentServiceError as e:
            raise PublishError(asset.original_name, e.message, status_code=e.status_code) from e
        except Exception as e:
            raise PublishError(asset.original_name, f"{type(e).__name__}: {e}") from e

        logger.debug(f"Successfully uploaded asset [{name}]")

    async def _register(self, records: list[AssetRecord]) -> None:
        if self.asset_directory is None:
            logger.warning("Named upload requested but no asset directory is configured")
            return
        # Later uploads of the same name win
        latest = {record.original_name: record.public_url for record in records}
        await gather_settled(
            {
                f"assets.register:{name}": self.asset_directory.register(name, public_url)
                for name, public_url in latest.items()
            },
            timeout=self.timeout,
        )
