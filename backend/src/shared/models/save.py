"""
Save Entity Model

A bookmark of a project by a user, unique per (user, project).
"""

import uuid

from sqlalchemy import ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.shared.models.base import Base, TimestampMixin


class Save(Base, TimestampMixin):
    """Saved (bookmarked) project."""

    __tablename__ = "saves"
    __table_args__ = (
        UniqueConstraint("user_id", "project_id", name="uq_saves_user_project"),
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

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Save(user_id={self.user_id}, project_id={self.project_id})>"
