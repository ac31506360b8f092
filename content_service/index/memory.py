"""In-memory search index and asset directory."""

from __future__ import annotations

from content_service.index.base import AssetDirectory, SearchIndex, matches_filters
from content_service.index.documents import IndexDocument


class MemorySearchIndex(SearchIndex):
    """Dictionary-backed search index."""

    def __init__(self) -> None:
        self.documents: dict[str, IndexDocument] = {}

    async def upsert(self, document: IndexDocument) -> None:
        self.documents[document.content_id] = document

    async def delete(self, content_id: str) -> None:
        self.documents.pop(content_id, None)

    async def get(self, content_id: str) -> IndexDocument | None:
        return self.documents.get(content_id)

    async def search(
        self,
        tag: str | None = None,
        category: str | None = None,
        limit: int = 50,
    ) -> list[IndexDocument]:
        matches = [
            self.documents[content_id]
            for content_id in sorted(self.documents)
            if matches_filters(self.documents[content_id], tag, category)
        ]
        return matches[:limit]


class MemoryAssetDirectory(AssetDirectory):
    """Dictionary-backed asset directory."""

    def __init__(self, assets: dict[str, str] | None = None) -> None:
        self.assets: dict[str, str] = dict(assets or {})

    async def register(self, name: str, public_url: str) -> None:
        self.assets[name] = public_url

    async def enumerate_named(self) -> dict[str, str]:
        return dict(self.assets)
