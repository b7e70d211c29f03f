"""
Project Schemas

The feed item is the one contract every listing endpoint (discover, feed,
search, saved, profile, collection) produces:

    {
        "id": "550e8400-...",
        "title": "Coffee shop rebrand",
        "description": "...",
        "coverImage": "https://cdn/.../1.png",
        "images": ["https://cdn/.../1.png", "..."],     # at most FEED_SLIDE_LIMIT
        "tags": ["branding"],
        "likes": 42,
        "comments": 7,
        "createdAt": "2025-03-02T09:12:44+00:00",
        "isLiked": false,
        "user": {"id": "...", "username": "ana", "name": "Ana", "avatar": null,
                 "isFollowing": false}
    }
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from src.config.settings import settings
from src.shared.schemas.common import CamelSchema


class UserSummary(CamelSchema):
    """Narrow public projection of a user."""

    id: str
    username: str
    name: str
    avatar: Optional[str] = None


class FeedUser(UserSummary):
    """Owner summary with the viewer's follow state."""

    is_following: bool = False


class ProjectFeedItem(CamelSchema):
    """Fully hydrated project summary."""

    id: UUID
    title: str
    description: Optional[str] = None
    cover_image: Optional[str] = None
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    likes: int = 0
    comments: int = 0
    created_at: datetime
    is_liked: bool = False
    user: FeedUser


class ProjectFeedPage(CamelSchema):
    """One page of a project listing."""

    projects: list[ProjectFeedItem]
    has_more: bool
    total: int
    page: int
    limit: int


class ProjectDetail(ProjectFeedItem):
    """Project page: the feed item plus owner-facing fields."""

    views: int = 0
    is_public: bool = True
    is_saved: bool = False
    is_owner: bool = False
    updated_at: datetime


class CreateProjectRequest(CamelSchema):
    """Request to publish a project. Slides are already-uploaded URLs."""

    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    slide_urls: list[str] = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    is_public: bool = True

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value

    @field_validator("slide_urls")
    @classmethod
    def slide_limit(cls, value: list[str]) -> list[str]:
        if len(value) > settings.MAX_SLIDES_PER_PROJECT:
            raise ValueError(f"At most {settings.MAX_SLIDES_PER_PROJECT} slides per project")
        return value

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in (t.strip() for t in value):
            if tag and tag not in seen:
                seen.append(tag)
        return seen


class LikeResponse(CamelSchema):
    """Result of a like / unlike."""

    success: bool = True
    liked: bool
    likes: int


class SaveStatusResponse(CamelSchema):
    """Whether the viewer has the project saved."""

    saved: bool
