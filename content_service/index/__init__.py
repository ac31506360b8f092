"""Secondary index package.

Provides the search index that mirrors envelope projections and the
directory of named assets injected into retrieved envelopes.
"""

from content_service.index.base import AssetDirectory, SearchIndex
from content_service.index.documents import PROJECTED_FIELDS, IndexDocument
from content_service.index.memory import MemoryAssetDirectory, MemorySearchIndex
from content_service.index.sql import SqlAssetDirectory, SqlSearchIndex

__all__ = [
    "AssetDirectory",
    "IndexDocument",
    "MemoryAssetDirectory",
    "MemorySearchIndex",
    "PROJECTED_FIELDS",
    "SearchIndex",
    "SqlAssetDirectory",
    "SqlSearchIndex",
]
