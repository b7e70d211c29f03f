"""
Collection Entity Models

User-curated groups of projects.

Model Hierarchy:
================
    Collection
       └── CollectionProject[]  (junction, one row per project in the collection)

SAMPLE COLLECTION RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 770e8400-e29b-41d4-a716-446655440000                      │
│ user_id          │ "user_2aBcD3eFgH"                                          │
│ name             │ "Packaging inspiration"                                    │
│ is_public        │ true                                                       │
│ cover_image_url  │ "https://cdn/.../1.png"                                    │
│ project_count    │ 7                                                          │
└──────────────────────────────────────────────────────────────────────────────┘

cover_image_url starts as the cover of the first project added;
project_count mirrors the number of junction rows.
"""

from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.shared.models.base import Base, TimestampMixin, utc_now


COLLECTION_NAME_MAX_LENGTH = 100


class Collection(Base, TimestampMixin):
    """
    Collection model.

    Attributes:
        id: Unique identifier (UUID v4)
        user_id: Owner
        name: Unique per owner, at most 100 characters
        description: Optional text
        is_public: Visible to other users when true
        cover_image_url: Cover taken from a project in the collection
        project_count: Denormalized number of projects
    """

    __tablename__ = "collections"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_collections_user_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(COLLECTION_NAME_MAX_LENGTH),
        nullable=False,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    is_public: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    cover_image_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    project_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, name={self.name!r})>"


class CollectionProject(Base):
    """Junction row: a project placed in a collection."""

    __tablename__ = "collection_projects"
    __table_args__ = (
        UniqueConstraint(
            "collection_id", "project_id", name="uq_collection_projects_pair"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    collection_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )
