"""
User Service

Profiles, profile pages and mention autocomplete.

Identity lives with the external provider. The local users row is a
profile keyed by the provider's subject id and is created or refreshed
through upsert_profile() before the user takes any social action.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.core.exceptions import ConflictError, UserNotFoundError
from src.shared.core.logging import get_logger
from src.shared.models.enums import FeedSort
from src.shared.repositories.follow_repository import FollowRepository
from src.shared.repositories.project_repository import ProjectFilter, ProjectRepository
from src.shared.repositories.user_repository import UserRepository
from src.shared.schemas.project import UserSummary
from src.shared.schemas.user import (
    UpdateProfileRequest,
    UserProfile,
    UserProfileResponse,
    UserStats,
)
from src.shared.services.cache_service import PROJECT_ACTIVITY_TAGS, CacheService, CacheTag
from src.shared.services.project_query_service import ProjectQueryService

logger = get_logger(__name__)


PROFILE_PROJECTS_LIMIT = 50
MAX_MENTION_SUGGESTIONS = 20


class UserService:
    """User profile business logic."""

    def __init__(self, session: AsyncSession, cache: Optional[CacheService] = None) -> None:
        self.session = session
        self.cache = cache
        self.user_repo = UserRepository(session)
        self.project_repo = ProjectRepository(session)
        self.follow_repo = FollowRepository(session)
        self.query = ProjectQueryService(session)

    @staticmethod
    def _profile(user) -> UserProfile:
        return UserProfile(
            id=user.id,
            username=user.username,
            name=user.name,
            avatar=user.avatar_url,
            bio=user.bio,
        )

    async def upsert_profile(self, user_id: str, request: UpdateProfileRequest) -> UserProfile:
        """
        Create or update the caller's profile.

        Raises:
            ConflictError: Username taken by another user
        """
        if await self.user_repo.username_exists(request.username, exclude_id=user_id):
            raise ConflictError("Username is already taken")

        try:
            async with self.session.begin_nested():
                user = await self.user_repo.upsert_profile(
                    user_id,
                    request.username,
                    display_name=request.display_name,
                    avatar_url=request.avatar_url,
                    bio=request.bio,
                )
        except IntegrityError:
            raise ConflictError("Username is already taken")

        # Owner summaries embedded in cached listings may have changed
        if self.cache is not None:
            await self.cache.invalidate_related([CacheTag.USERS, *PROJECT_ACTIVITY_TAGS])

        logger.info("Profile saved", user_id=user_id, username=user.username)
        return self._profile(user)

    async def get_profile(self, username: str, viewer_id: Optional[str] = None) -> UserProfileResponse:
        """
        Profile page: the user, stats and their projects, newest first.

        The owner sees private projects too; everyone else only public ones.
        """
        user = await self.user_repo.get_by_username(username)
        if user is None:
            raise UserNotFoundError(username)

        is_own = viewer_id == user.id
        filters = ProjectFilter(is_public=None if is_own else True, owner_id=user.id)

        projects = await self.query.query_projects(
            filters, FeedSort.RECENT, PROFILE_PROJECTS_LIMIT, 0, viewer_id
        )
        project_total = await self.query.count_projects(filters)
        _, total_likes = await self.project_repo.owner_stats(user.id)
        followers = await self.follow_repo.count_followers(user.id)
        following = await self.follow_repo.count_following(user.id)

        is_following = False
        if viewer_id is not None and not is_own:
            is_following = await self.follow_repo.get_pair(viewer_id, user.id) is not None

        return UserProfileResponse(
            user=self._profile(user),
            stats=UserStats(
                projects=project_total,
                followers=followers,
                following=following,
                likes=total_likes,
            ),
            is_following=is_following,
            is_own_profile=is_own,
            projects=projects,
        )

    async def mention_suggestions(
        self,
        partial: Optional[str],
        viewer_id: str,
        limit: int = 5,
    ) -> list[UserSummary]:
        """Users whose username or name contains partial, excluding the viewer."""
        partial = (partial or "").strip().lstrip("@")
        if not partial:
            return []

        users = await self.user_repo.suggest(
            partial,
            limit=max(1, min(limit, MAX_MENTION_SUGGESTIONS)),
            exclude_ids=[viewer_id],
        )
        return [
            UserSummary(id=u.id, username=u.username, name=u.name, avatar=u.avatar_url)
            for u in users
        ]
