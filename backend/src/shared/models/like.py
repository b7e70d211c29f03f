"""
Like Entity Model

A user's like of exactly one target: a project or a comment.

Constraints:
============
    - exactly one of project_id / comment_id is set (check constraint)
    - one like per (user, project) and per (user, comment)

A duplicate insert surfaces as IntegrityError, which services translate
into a 409 with a specific message.
"""

from typing import Optional
import uuid

from sqlalchemy import CheckConstraint, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.shared.models.base import Base, TimestampMixin


class Like(Base, TimestampMixin):
    """Like of a project or of a comment."""

    __tablename__ = "likes"
    __table_args__ = (
        CheckConstraint(
            "(project_id IS NOT NULL AND comment_id IS NULL) "
            "OR (project_id IS NULL AND comment_id IS NOT NULL)",
            name="ck_likes_single_target",
        ),
        UniqueConstraint("user_id", "project_id", name="uq_likes_user_project"),
        UniqueConstraint("user_id", "comment_id", name="uq_likes_user_comment"),
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

    project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    comment_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        target = self.project_id or self.comment_id
        return f"<Like(user_id={self.user_id}, target={target})>"
