"""
User Schemas

Profiles, search results and mention suggestions.
"""

import re
from typing import Optional

from pydantic import Field, field_validator

from src.shared.schemas.common import CamelSchema
from src.shared.schemas.project import ProjectFeedItem, UserSummary


USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9._-]{3,50}$")


class UpdateProfileRequest(CamelSchema):
    """Create or update the caller's profile."""

    username: str
    display_name: Optional[str] = Field(default=None, max_length=100)
    avatar_url: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=500)

    @field_validator("username")
    @classmethod
    def username_format(cls, value: str) -> str:
        value = value.strip()
        if not USERNAME_PATTERN.match(value):
            raise ValueError(
                "Username must be 3-50 characters of letters, digits, '.', '_' or '-'"
            )
        return value


class UserProfile(UserSummary):
    bio: Optional[str] = None


class UserStats(CamelSchema):
    projects: int
    followers: int
    following: int
    likes: int


class UserProfileResponse(CamelSchema):
    user: UserProfile
    stats: UserStats
    is_following: bool = False
    is_own_profile: bool = False
    projects: list[ProjectFeedItem] = Field(default_factory=list)


class UserSearchItem(UserSummary):
    bio: Optional[str] = None
    is_following: bool = False


class SearchResponse(CamelSchema):
    projects: list[ProjectFeedItem]
    users: list[UserSearchItem]
    total: int
    has_more: bool


class MentionSuggestionsResponse(CamelSchema):
    suggestions: list[UserSummary]


class FollowRequest(CamelSchema):
    following_id: str


class FollowResponse(CamelSchema):
    following: bool
    followers: int
