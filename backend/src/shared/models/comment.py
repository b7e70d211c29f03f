"""
Comment Entity Model

A comment on a project. Comments form a two-level tree: top-level comments
(parent_id NULL) and their replies. A reply always points at a top-level
comment of the same project.
"""

from typing import Optional
import uuid

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.shared.models.base import Base, JSONList, TimestampMixin


class Comment(Base, TimestampMixin):
    """
    Comment model.

    Attributes:
        id: Unique identifier (UUID v4)
        project_id: Project being discussed
        user_id: Author
        parent_id: Top-level comment this replies to, NULL for top-level
        content: Trimmed comment text
        tags: Free-form tags
        like_count: Denormalized number of likes
    """

    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    tags: Mapped[list[str]] = mapped_column(
        JSONList,
        default=list,
        nullable=False,
    )

    like_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, project_id={self.project_id})>"
