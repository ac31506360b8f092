"""SQLAlchemy models for the search index database.

Tables:
    envelopes: One row per indexed envelope projection
    named_assets: Named asset -> public URL directory
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


class IndexedEnvelope(Base):
    """Indexed projection of a stored envelope.

    Attributes:
        content_id: Caller-supplied content ID (primary key)
        title: Title copied out for lookups (if it was a string)
        document: The full IndexDocument as JSON
        indexed_at: Time of the last upsert
    """

    __tablename__ = "envelopes"

    content_id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    document: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    indexed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<IndexedEnvelope(content_id={self.content_id!r})>"


class NamedAsset(Base):
    """Named asset registered through a named upload."""

    __tablename__ = "named_assets"

    name: Mapped[str] = mapped_column(String(255), primary_key=True)
    public_url: Mapped[str] = mapped_column(Text, nullable=False)
    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<NamedAsset(name={self.name!r})>"
