"""Tests for content_service.index.sql module.

Runs against an in-memory aiosqlite database.
"""

import pytest
import pytest_asyncio
from sqlalchemy import event

from content_service.database import IndexDatabase
from content_service.index.documents import IndexDocument
from content_service.index.sql import SqlAssetDirectory, SqlSearchIndex


@pytest_asyncio.fixture
async def database():
    db = IndexDatabase("sqlite+aiosqlite:///:memory:")
    await db.init()
    yield db
    await db.close()


@pytest.fixture
def sql_index(database):
    return SqlSearchIndex(database)


@pytest.fixture
def sql_directory(database):
    return SqlAssetDirectory(database)


class TestSqlSearchIndex:
    """Tests for SqlSearchIndex."""

    @pytest.mark.asyncio
    async def test_upsert_and_get(self, sql_index):
        doc = IndexDocument.from_envelope("post-42", {"title": "Hi", "tags": ["a", "b"], "body": "..."})
        await sql_index.upsert(doc)
        stored = await sql_index.get("post-42")
        assert stored.to_document() == {"content_id": "post-42", "title": "Hi", "tags": ["a", "b"]}

    @pytest.mark.asyncio
    async def test_upsert_replaces_existing(self, sql_index):
        await sql_index.upsert(IndexDocument(content_id="a", title="old", tags=["t"]))
        await sql_index.upsert(IndexDocument(content_id="a", title="new"))
        stored = await sql_index.get("a")
        assert stored.to_document() == {"content_id": "a", "title": "new"}

    @pytest.mark.asyncio
    async def test_get_missing(self, sql_index):
        assert await sql_index.get("missing") is None

    @pytest.mark.asyncio
    async def test_delete(self, sql_index):
        await sql_index.upsert(IndexDocument(content_id="a"))
        await sql_index.delete("a")
        assert await sql_index.get("a") is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, sql_index):
        await sql_index.delete("missing")
        await sql_index.delete("missing")

    @pytest.mark.asyncio
    async def test_non_string_title(self, sql_index):
        await sql_index.upsert(IndexDocument(content_id="a", title={"en": "Hi"}))
        assert (await sql_index.get("a")).title == {"en": "Hi"}

    @pytest.mark.asyncio
    async def test_search(self, sql_index):
        await sql_index.upsert(IndexDocument(content_id="b", tags=["x"], categories=["news"]))
        await sql_index.upsert(IndexDocument(content_id="a", tags=["x", "y"]))

        assert [d.content_id for d in await sql_index.search()] == ["a", "b"]
        assert [d.content_id for d in await sql_index.search(tag="y")] == ["a"]
        assert [d.content_id for d in await sql_index.search(category="news")] == ["b"]

    @pytest.mark.asyncio
    async def test_unfiltered_search_limits_in_sql(self, sql_index, database):
        for content_id in ("c", "a", "b"):
            await sql_index.upsert(IndexDocument(content_id=content_id))

        statements = []

        def capture(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        event.listen(database.engine.sync_engine, "before_cursor_execute", capture)
        try:
            results = await sql_index.search(limit=2)
        finally:
            event.remove(database.engine.sync_engine, "before_cursor_execute", capture)

        assert [d.content_id for d in results] == ["a", "b"]
        selects = [s for s in statements if s.lstrip().upper().startswith("SELECT")]
        assert selects and all("LIMIT" in s.upper() for s in selects)

    @pytest.mark.asyncio
    async def test_filtered_search_applies_limit(self, sql_index):
        for content_id in ("a", "b", "c"):
            await sql_index.upsert(IndexDocument(content_id=content_id, tags=["x"]))
        assert [d.content_id for d in await sql_index.search(tag="x", limit=2)] == ["a", "b"]


class TestSqlAssetDirectory:
    """Tests for SqlAssetDirectory."""

    @pytest.mark.asyncio
    async def test_empty(self, sql_directory):
        assert await sql_directory.enumerate_named() == {}

    @pytest.mark.asyncio
    async def test_register_replaces(self, sql_directory):
        await sql_directory.register("logo", "https://cdn/logo-1.png")
        await sql_directory.register("logo", "https://cdn/logo-2.png")
        await sql_directory.register("font", "https://cdn/font-1.woff")
        assert await sql_directory.enumerate_named() == {
            "font": "https://cdn/font-1.woff",
            "logo": "https://cdn/logo-2.png",
        }


class TestIndexDatabase:
    """Tests for IndexDatabase."""

    @pytest.mark.asyncio
    async def test_check_connection(self, database):
        assert await database.check_connection()
