"""Tests for the in-memory search index and asset directory."""

import pytest

from content_service.index.documents import IndexDocument
from content_service.index.memory import MemoryAssetDirectory, MemorySearchIndex


class TestMemorySearchIndex:
    """Tests for MemorySearchIndex."""

    @pytest.mark.asyncio
    async def test_upsert_replaces(self):
        index = MemorySearchIndex()
        await index.upsert(IndexDocument(content_id="a", title="one"))
        await index.upsert(IndexDocument(content_id="a", title="two"))
        assert (await index.get("a")).title == "two"

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self):
        index = MemorySearchIndex()
        await index.delete("missing")
        assert await index.get("missing") is None

    @pytest.mark.asyncio
    async def test_search_filters(self):
        index = MemorySearchIndex()
        await index.upsert(IndexDocument(content_id="b", tags=["x"], categories=["news"]))
        await index.upsert(IndexDocument(content_id="a", tags=["x", "y"]))
        await index.upsert(IndexDocument(content_id="c", tags="x"))

        assert [d.content_id for d in await index.search(tag="x")] == ["a", "b", "c"]
        assert [d.content_id for d in await index.search(tag="y")] == ["a"]
        assert [d.content_id for d in await index.search(category="news")] == ["b"]
        assert len(await index.search(limit=2)) == 2


class TestMemoryAssetDirectory:
    """Tests for MemoryAssetDirectory."""

    @pytest.mark.asyncio
    async def test_register_and_enumerate(self):
        directory = MemoryAssetDirectory()
        await directory.register("logo", "https://cdn/logo-1.png")
        await directory.register("logo", "https://cdn/logo-2.png")
        assert await directory.enumerate_named() == {"logo": "https://cdn/logo-2.png"}

    @pytest.mark.asyncio
    async def test_enumerate_returns_copy(self):
        directory = MemoryAssetDirectory({"a": "u"})
        named = await directory.enumerate_named()
        named["b"] = "v"
        assert await directory.enumerate_named() == {"a": "u"}
