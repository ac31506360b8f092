"""Abstract interfaces for the search index and the named-asset directory."""

from __future__ import annotations

from abc import ABC, abstractmethod

from content_service.index.documents import IndexDocument


class SearchIndex(ABC):
    """Secondary, queryable store of envelope projections keyed by content ID."""

    @abstractmethod
    async def upsert(self, document: IndexDocument) -> None:
        """Insert a document, replacing any document with the same content ID.

        Args:
            document: Projection to index.
        """

    @abstractmethod
    async def delete(self, content_id: str) -> None:
        """Remove a document. Removing a missing document is a no-op.

        Args:
            content_id: Content ID of the document.
        """

    @abstractmethod
    async def get(self, content_id: str) -> IndexDocument | None:
        """Fetch a document by content ID.

        Returns:
            The document, or None if it is not indexed.
        """

    @abstractmethod
    async def search(
        self,
        tag: str | None = None,
        category: str | None = None,
        limit: int = 50,
    ) -> list[IndexDocument]:
        """List indexed documents, optionally filtered by tag and/or category.

        Args:
            tag: Only documents whose ``tags`` contain this value.
            category: Only documents whose ``categories`` contain this value.
            limit: Maximum number of documents returned.

        Returns:
            Matching documents ordered by content ID.
        """

    async def close(self) -> None:
        """Release any held connections."""


class AssetDirectory(ABC):
    """Mapping of named assets to their public URLs.

    Populated by named asset uploads and injected into retrieved envelopes.
    """

    @abstractmethod
    async def register(self, name: str, public_url: str) -> None:
        """Point ``name`` at ``public_url``, replacing any earlier URL."""

    @abstractmethod
    async def enumerate_named(self) -> dict[str, str]:
        """Return every registered name with its public URL."""

    async def close(self) -> None:
        """Release any held connections."""


def matches_filters(document: IndexDocument, tag: str | None, category: str | None) -> bool:
    """Check a document against optional tag/category filters."""
    if tag is not None and tag not in _as_list(document.tags):
        return False
    if category is not None and category not in _as_list(document.categories):
        return False
    return True


def _as_list(value: object) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
