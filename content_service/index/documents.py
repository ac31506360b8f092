"""Search index document schema.

An IndexDocument is the projection of an envelope kept in the search index:
``content_id`` plus whichever of the projected fields the envelope carries.
Absent fields are left out rather than defaulted.

Examples:
    >>> doc = IndexDocument.from_envelope("post-42", {"title": "Hi", "body": "..."})
    >>> doc.to_document()
    {'content_id': 'post-42', 'title': 'Hi'}
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

PROJECTED_FIELDS = ("title", "publish_date", "tags", "categories")


class IndexDocument(BaseModel):
    """Indexed projection of an envelope."""

    model_config = ConfigDict(extra="forbid")

    content_id: str
    title: Any = None
    publish_date: Any = None
    tags: Any = None
    categories: Any = None

    @classmethod
    def from_envelope(cls, content_id: str, envelope: dict[str, Any]) -> "IndexDocument":
        """Pick the projected fields that are present in an envelope."""
        picked = {field: envelope[field] for field in PROJECTED_FIELDS if field in envelope}
        return cls(content_id=content_id, **picked)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "IndexDocument":
        return cls(**document)

    def to_document(self) -> dict[str, Any]:
        """Plain dict containing only the fields that were set."""
        return self.model_dump(exclude_unset=True)
