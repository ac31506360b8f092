"""Composition root and FastAPI dependencies.

``build_services`` turns Settings into concrete backends and wires them into
the coordinator and pipeline. The FastAPI app keeps the result on
``app.state.services``; routes reach it through the ``get_*`` dependencies.

Examples:
    >>> services = await build_services(get_settings())
    >>> await services.coordinator.store("post-42", {"title": "Hi"})
    >>> await services.close()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request

from content_service.config import Settings, StorageProvider
from content_service.core.assets import AssetPipeline
from content_service.core.coordinator import EnvelopeCoordinator
from content_service.database import IndexDatabase
from content_service.index.base import AssetDirectory, SearchIndex
from content_service.index.memory import MemoryAssetDirectory, MemorySearchIndex
from content_service.index.sql import SqlAssetDirectory, SqlSearchIndex
from content_service.storage.backends.base import BlobStore
from content_service.storage.backends.http import HttpBlobStore
from content_service.storage.backends.local import LocalBlobStore
from content_service.storage.backends.memory import MemoryBlobStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the request handlers need, built once per process."""

    content_store: BlobStore
    asset_store: BlobStore
    index: SearchIndex
    asset_directory: AssetDirectory
    coordinator: EnvelopeCoordinator
    pipeline: AssetPipeline
    database: IndexDatabase | None = None

    async def check_index(self) -> bool:
        if self.database is None:
            return True
        return await self.database.check_connection()

    async def close(self) -> None:
        """Close backend connections."""
        await self.content_store.close()
        await self.asset_store.close()
        await self.index.close()
        await self.asset_directory.close()
        if self.database is not None:
            await self.database.close()


def make_blob_store(settings: Settings, container: str, public_base_url: str | None = None) -> BlobStore:
    """Create the blob store for one container based on settings."""
    if settings.STORAGE_PROVIDER == StorageProvider.MEMORY:
        return MemoryBlobStore(container, public_base_url=public_base_url)

    if settings.STORAGE_PROVIDER == StorageProvider.HTTP:
        return HttpBlobStore(
            endpoint=settings.STORAGE_ENDPOINT,
            container=container,
            auth_token=settings.STORAGE_AUTH_TOKEN,
            public_base_url=public_base_url,
            timeout=settings.backend_timeout or 60.0,
        )

    return LocalBlobStore(settings.STORAGE_ROOT, container, public_base_url=public_base_url)


def assemble_services(
    content_store: BlobStore,
    asset_store: BlobStore,
    index: SearchIndex,
    asset_directory: AssetDirectory,
    timeout: float | None = None,
    chunk_size: int | None = None,
    spool_max_size: int | None = None,
    database: IndexDatabase | None = None,
) -> Services:
    """Wire already-built backends into the coordinator and pipeline."""
    pipeline_options = {}
    if chunk_size is not None:
        pipeline_options["chunk_size"] = chunk_size
    if spool_max_size is not None:
        pipeline_options["spool_max_size"] = spool_max_size

    return Services(
        content_store=content_store,
        asset_store=asset_store,
        index=index,
        asset_directory=asset_directory,
        coordinator=EnvelopeCoordinator(
            content_store, index, asset_directory=asset_directory, timeout=timeout
        ),
        pipeline=AssetPipeline(
            asset_store, asset_directory=asset_directory, timeout=timeout, **pipeline_options
        ),
        database=database,
    )


async def build_services(settings: Settings) -> Services:
    """Build all backends from settings.

    The memory provider keeps the index in memory too; every other provider
    uses the SQL index at INDEX_DATABASE_URL.
    """
    content_store = make_blob_store(settings, settings.CONTENT_CONTAINER)
    asset_store = make_blob_store(
        settings, settings.ASSET_CONTAINER, public_base_url=settings.ASSET_PUBLIC_BASE_URL
    )

    database = None
    if settings.STORAGE_PROVIDER == StorageProvider.MEMORY:
        index: SearchIndex = MemorySearchIndex()
        asset_directory: AssetDirectory = MemoryAssetDirectory()
    else:
        database = IndexDatabase(settings.INDEX_DATABASE_URL)
        await database.init()
        index = SqlSearchIndex(database)
        asset_directory = SqlAssetDirectory(database)

    logger.info(
        f"Services built: provider={settings.STORAGE_PROVIDER.value}, "
        f"content={settings.CONTENT_CONTAINER}, assets={settings.ASSET_CONTAINER}"
    )
    return assemble_services(
        content_store,
        asset_store,
        index,
        asset_directory,
        timeout=settings.backend_timeout,
        chunk_size=settings.ASSET_CHUNK_SIZE,
        spool_max_size=settings.ASSET_SPOOL_MAX_BYTES,
        database=database,
    )


def get_services(request: Request) -> Services:
    """FastAPI dependency returning the process-wide services."""
    return request.app.state.services


def get_coordinator(request: Request) -> EnvelopeCoordinator:
    return get_services(request).coordinator


def get_pipeline(request: Request) -> AssetPipeline:
    return get_services(request).pipeline
