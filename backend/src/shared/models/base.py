"""
Base Model Classes

Declarative base, timestamp mixin and portable column types shared by all
Folio models.

Model Hierarchy:
================
    Base                    ← SQLAlchemy declarative base
       │
       └── TimestampMixin   ← created_at / updated_at

Portable Types:
===============
    JSONList  → JSONB on PostgreSQL, JSON elsewhere (slide URLs, tags)

Usage:
======
    from src.shared.models.base import Base, TimestampMixin, JSONList

    class Project(Base, TimestampMixin):
        __tablename__ = "projects"
        id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
        tags: Mapped[list[str]] = mapped_column(JSONList, default=list)
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Ordered JSON arrays: JSONB in production, plain JSON for other dialects
JSONList = JSON().with_variant(JSONB(), "postgresql")


def utc_now() -> datetime:
    """Timezone-aware current time used for Python-side defaults."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Example:
        class Follow(Base, TimestampMixin):
            __tablename__ = "follows"

            id: Mapped[uuid.UUID] = mapped_column(
                Uuid,
                primary_key=True,
                default=uuid.uuid4
            )
    """


class TimestampMixin:
    """
    Mixin that adds automatic timestamp tracking to models.

    - created_at: Set when the record is first inserted
    - updated_at: Refreshed by SQLAlchemy whenever the record is modified

    Both columns carry a server default for rows written outside the ORM
    and a Python default so freshly flushed objects have the value without
    a round trip.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utc_now,
        nullable=False,
    )
