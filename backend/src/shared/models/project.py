"""
Project Entity Model

A design project: an ordered set of image slides with a title, tags and
denormalized engagement counters.

SAMPLE PROJECT RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ 550e8400-e29b-41d4-a716-446655440000                      │
│ user_id          │ "user_2aBcD3eFgH"                                          │
│ title            │ "Coffee shop rebrand"                                      │
│ slide_urls       │ ["https://cdn/.../1.png", "https://cdn/.../2.png"]        │
│ tags             │ ["branding", "logo"]                                       │
│ is_public        │ true                                                       │
│ like_count       │ 42                                                         │
│ view_count       │ 310                                                        │
└──────────────────────────────────────────────────────────────────────────────┘

The cover image is the first slide. like_count mirrors the number of rows
in likes for the project and is only changed in the same transaction as
the like row itself.
"""

from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.models.base import Base, JSONList, TimestampMixin


if TYPE_CHECKING:
    from src.shared.models.user import User


class Project(Base, TimestampMixin):
    """
    Project model.

    Attributes:
        id: Unique identifier (UUID v4)
        user_id: Owner
        title: Required title
        description: Optional long text
        slide_urls: Ordered slide image URLs
        tags: Free-form tags
        is_public: Visible to everyone when true, owner only otherwise
        like_count: Denormalized number of likes
        view_count: Denormalized number of detail views
    """

    __tablename__ = "projects"

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

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    slide_urls: Mapped[list[str]] = mapped_column(
        JSONList,
        default=list,
        nullable=False,
    )

    tags: Mapped[list[str]] = mapped_column(
        JSONList,
        default=list,
        nullable=False,
    )

    is_public: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # DENORMALIZED COUNTERS
    # ═══════════════════════════════════════════════════════════════════════════

    like_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    view_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="projects",
    )

    @property
    def cover_image(self) -> Optional[str]:
        """First slide, or None for a project without slides."""
        return self.slide_urls[0] if self.slide_urls else None

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title={self.title!r})>"
