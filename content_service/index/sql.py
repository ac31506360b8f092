"""SQLAlchemy-backed search index and asset directory.

Examples:
    >>> db = IndexDatabase("sqlite+aiosqlite:///./content_index.db")
    >>> await db.init()
    >>> index = SqlSearchIndex(db)
    >>> await index.upsert(IndexDocument(content_id="post-42", title="Hi"))
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, select

from content_service.database import IndexDatabase
from content_service.index.base import AssetDirectory, SearchIndex, matches_filters
from content_service.index.documents import IndexDocument
from content_service.index.models import IndexedEnvelope, NamedAsset

logger = logging.getLogger(__name__)


class SqlSearchIndex(SearchIndex):
    """Search index stored in the ``envelopes`` table."""

    def __init__(self, database: IndexDatabase) -> None:
        self.database = database

    async def upsert(self, document: IndexDocument) -> None:
        row = IndexedEnvelope(
            content_id=document.content_id,
            title=document.title if isinstance(document.title, str) else None,
            document=document.to_document(),
        )
        async with self.database.session() as session:
            await session.merge(row)
        logger.debug(f"Indexed envelope [{document.content_id}]")

    async def delete(self, content_id: str) -> None:
        async with self.database.session() as session:
            result = await session.execute(
                delete(IndexedEnvelope).where(IndexedEnvelope.content_id == content_id)
            )
        if result.rowcount == 0:
            logger.debug(f"No index document for [{content_id}]; nothing to delete")

    async def get(self, content_id: str) -> IndexDocument | None:
        async with self.database.session() as session:
            row = await session.get(IndexedEnvelope, content_id)
        if row is None:
            return None
        return IndexDocument.from_document(row.document)

    async def search(
        self,
        tag: str | None = None,
        category: str | None = None,
        limit: int = 50,
    ) -> list[IndexDocument]:
        query = select(IndexedEnvelope.document).order_by(IndexedEnvelope.content_id)
        if tag is None and category is None:
            async with self.database.session() as session:
                result = await session.execute(query.limit(limit))
                return [IndexDocument.from_document(document) for document in result.scalars()]

        # tags/categories live inside the JSON column, so filter in Python
        async with self.database.session() as session:
            result = await session.execute(query)
            documents = [IndexDocument.from_document(document) for document in result.scalars()]

        matches = [doc for doc in documents if matches_filters(doc, tag, category)]
        return matches[:limit]


class SqlAssetDirectory(AssetDirectory):
    """Asset directory stored in the ``named_assets`` table."""

    def __init__(self, database: IndexDatabase) -> None:
        self.database = database

    async def register(self, name: str, public_url: str) -> None:
        async with self.database.session() as session:
            await session.merge(NamedAsset(name=name, public_url=public_url))
        logger.debug(f"Registered named asset [{name}] -> {public_url}")

    async def enumerate_named(self) -> dict[str, str]:
        async with self.database.session() as session:
            result = await session.execute(select(NamedAsset).order_by(NamedAsset.name))
            return {asset.name: asset.public_url for asset in result.scalars().all()}
