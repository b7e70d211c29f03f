"""
User Entity Model

A Folio member. Accounts live in the external identity provider; this row
only carries the public profile, keyed by the provider's subject id.

SAMPLE USER RECORD:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id               │ "user_2aBcD3eFgH"                                          │
│ username         │ "ana.design"                                               │
│ display_name     │ "Ana Ramos"                                                │
│ avatar_url       │ "https://cdn.example.com/avatars/ana.png"                  │
│ bio              │ "Brand and type designer"                                  │
└──────────────────────────────────────────────────────────────────────────────┘

Results never embed the full row, only the summary
{id, username, name, avatar} with name = display_name or username.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.shared.models.base import Base, TimestampMixin


if TYPE_CHECKING:
    from src.shared.models.project import Project


class User(Base, TimestampMixin):
    """
    User model.

    Attributes:
        id: Identity provider subject (opaque string)
        username: Unique handle, used for mentions and profile URLs
        display_name: Optional human-readable name
        avatar_url: Optional avatar image URL
        bio: Optional profile text

    Relationships:
        projects: Projects owned by this user
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
    )

    display_name: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    avatar_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    bio: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    projects: Mapped[list["Project"]] = relationship(
        "Project",
        back_populates="owner",
        passive_deletes=True,
    )

    @property
    def name(self) -> str:
        """Display name with username fallback."""
        return self.display_name or self.username

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
