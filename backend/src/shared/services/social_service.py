"""
Social Service

Likes, saves and follows.

ATOMICITY:
==========
The join row and its denormalized counter change together inside one
SAVEPOINT:

    async with session.begin_nested():
        INSERT INTO likes ...                       ← IntegrityError → 409
        UPDATE projects SET like_count = like_count + 1 RETURNING like_count

so a failure between the two statements can never leave the counter out of
step with the likes table. Notifications run afterwards in their own
SAVEPOINTs through NotificationService and cannot undo the action.

Usage:
======
    service = SocialService(db, cache)
    likes = await service.like_project(viewer_id, project_id)
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from src.shared.core.exceptions import (
    CommentNotFoundError,
    ConflictError,
    NotFoundError,
    ProjectNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from src.shared.core.logging import get_logger
from src.shared.models.comment import Comment
from src.shared.models.project import Project
from src.shared.models.user import User
from src.shared.repositories.comment_repository import CommentRepository
from src.shared.repositories.follow_repository import FollowRepository
from src.shared.repositories.like_repository import LikeRepository
from src.shared.repositories.project_repository import ProjectRepository
from src.shared.repositories.save_repository import SaveRepository
from src.shared.repositories.user_repository import UserRepository
from src.shared.services.cache_service import PROJECT_ACTIVITY_TAGS, CacheService, CacheTag
from src.shared.services.notification_service import (
    FIRST_LIKE_MILESTONE,
    FOLLOWER_MILESTONES,
    PROJECT_LIKE_MILESTONES,
    NotificationService,
    NotificationTemplates,
    is_milestone,
    truncate_excerpt,
)

logger = get_logger(__name__)


class SocialService:
    """Engagement actions between users and projects."""

    def __init__(self, session: AsyncSession, cache: Optional[CacheService] = None) -> None:
        self.session = session
        self.cache = cache
        self.user_repo = UserRepository(session)
        self.project_repo = ProjectRepository(session)
        self.comment_repo = CommentRepository(session)
        self.like_repo = LikeRepository(session)
        self.save_repo = SaveRepository(session)
        self.follow_repo = FollowRepository(session)
        self.notifications = NotificationService(session)

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPERS
    # ═══════════════════════════════════════════════════════════════════════════

    async def _require_user(self, user_id: str) -> User:
        user = await self.user_repo.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def _require_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get(project_id)
        if project is None:
            raise ProjectNotFoundError(str(project_id))
        return project

    async def _invalidate(self, tags) -> None:
        if self.cache is not None:
            await self.cache.invalidate_related(tags)

    # ═══════════════════════════════════════════════════════════════════════════
    # PROJECT LIKES
    # ═══════════════════════════════════════════════════════════════════════════

    async def like_project(self, viewer_id: str, project_id: UUID) -> int:
        """
        Like a project.

        Returns:
            The project's new like count

        Raises:
            ProjectNotFoundError: Unknown project
            ConflictError: Already liked
        """
        project = await self._require_project(project_id)
        liker = await self._require_user(viewer_id)

        try:
            async with self.session.begin_nested():
                await self.like_repo.create(user_id=viewer_id, project_id=project_id)
                likes = await self.project_repo.adjust_like_count(project_id, 1)
        except IntegrityError:
            raise ConflictError("Project already liked")
        set_committed_value(project, "like_count", likes)

        payloads = []
        if project.user_id != viewer_id:
            payloads.append(
                NotificationTemplates.project_liked(liker.name, project.title, project.id)
                .for_user(project.user_id)
            )
            if likes == FIRST_LIKE_MILESTONE:
                payloads.append(
                    NotificationTemplates.first_project_like(project.title, project.id)
                    .for_user(project.user_id)
                )
            elif is_milestone(likes, PROJECT_LIKE_MILESTONES):
                payloads.append(
                    NotificationTemplates.project_popular(project.title, likes, project.id)
                    .for_user(project.user_id)
                )
        await self.notifications.notify_batch(payloads)

        await self._invalidate(PROJECT_ACTIVITY_TAGS)
        logger.info("Project liked", project_id=str(project_id), viewer_id=viewer_id, likes=likes)
        return likes

    async def unlike_project(self, viewer_id: str, project_id: UUID) -> int:
        """
        Remove a like.

        Returns:
            The project's new like count

        Raises:
            NotFoundError: The viewer has not liked this project
        """
        like = await self.like_repo.get_project_like(viewer_id, project_id)
        if like is None:
            raise NotFoundError("Like")

        async with self.session.begin_nested():
            await self.session.delete(like)
            await self.session.flush()
            likes = await self.project_repo.adjust_like_count(project_id, -1)

        project = await self.project_repo.get(project_id)
        if project is not None:
            set_committed_value(project, "like_count", likes)

        await self._invalidate(PROJECT_ACTIVITY_TAGS)
        logger.info("Project unliked", project_id=str(project_id), viewer_id=viewer_id, likes=likes)
        return likes

    # ═══════════════════════════════════════════════════════════════════════════
    # SAVES
    # ═══════════════════════════════════════════════════════════════════════════

    async def is_saved(self, viewer_id: str, project_id: UUID) -> bool:
        return await self.save_repo.get_pair(viewer_id, project_id) is not None

    async def toggle_save(self, viewer_id: str, project_id: UUID) -> bool:
        """
        Save the project, or unsave it if already saved.

        Returns:
            True if the project is now saved
        """
        project = await self._require_project(project_id)
        existing = await self.save_repo.get_pair(viewer_id, project_id)
        if existing is not None:
            await self.session.delete(existing)
            await self.session.flush()
            return False

        saver = await self._require_user(viewer_id)
        try:
            async with self.session.begin_nested():
                await self.save_repo.create(user_id=viewer_id, project_id=project_id)
        except IntegrityError:
            raise ConflictError("Project already saved")

        if project.user_id != viewer_id:
            content = NotificationTemplates.project_saved(saver.name, project.title, project.id)
            await self.notifications.notify_payload(content.for_user(project.user_id))
        return True

    # ═══════════════════════════════════════════════════════════════════════════
    # FOLLOWS
    # ═══════════════════════════════════════════════════════════════════════════

    async def follow(self, viewer_id: str, following_id: str) -> int:
        """
        Follow a user.

        Returns:
            The followed user's new follower count

        Raises:
            ValidationError: Self-follow
            UserNotFoundError: Unknown user
            ConflictError: Already following
        """
        if viewer_id == following_id:
            raise ValidationError("You cannot follow yourself")

        target = await self._require_user(following_id)
        follower = await self._require_user(viewer_id)

        try:
            async with self.session.begin_nested():
                await self.follow_repo.create(follower_id=viewer_id, following_id=following_id)
        except IntegrityError:
            raise ConflictError("Already following this user")

        followers = await self.follow_repo.count_followers(following_id)

        payloads = [
            NotificationTemplates.user_followed(follower.name, follower.username)
            .for_user(following_id)
        ]
        if is_milestone(followers, FOLLOWER_MILESTONES):
            payloads.append(
                NotificationTemplates.follower_milestone(followers, target.username)
                .for_user(following_id)
            )
        await self.notifications.notify_batch(payloads)

        await self._invalidate([CacheTag.DISCOVER, CacheTag.FEED, CacheTag.USERS])
        logger.info("User followed", follower_id=viewer_id, following_id=following_id)
        return followers

    async def unfollow(self, viewer_id: str, following_id: str) -> int:
        """
        Stop following a user.

        Returns:
            The user's new follower count

        Raises:
            NotFoundError: Not following this user
        """
        follow = await self.follow_repo.get_pair(viewer_id, following_id)
        if follow is None:
            raise NotFoundError("Follow")

        await self.session.delete(follow)
        await self.session.flush()

        await self._invalidate([CacheTag.DISCOVER, CacheTag.FEED, CacheTag.USERS])
        return await self.follow_repo.count_followers(following_id)

    # ═══════════════════════════════════════════════════════════════════════════
    # COMMENT LIKES
    # ═══════════════════════════════════════════════════════════════════════════

    async def toggle_comment_like(self, viewer_id: str, comment_id: UUID) -> tuple[bool, int]:
        """
        Like a comment, or remove the like if present.

        Returns:
            (liked, new like count)
        """
        comment: Optional[Comment] = await self.comment_repo.get(comment_id)
        if comment is None:
            raise CommentNotFoundError(str(comment_id))

        existing = await self.like_repo.get_comment_like(viewer_id, comment_id)
        if existing is not None:
            async with self.session.begin_nested():
                await self.session.delete(existing)
                await self.session.flush()
                likes = await self.comment_repo.adjust_like_count(comment_id, -1)
            set_committed_value(comment, "like_count", likes)
            return False, likes

        liker = await self._require_user(viewer_id)
        try:
            async with self.session.begin_nested():
                await self.like_repo.create(user_id=viewer_id, comment_id=comment_id)
                likes = await self.comment_repo.adjust_like_count(comment_id, 1)
        except IntegrityError:
            raise ConflictError("Comment already liked")
        set_committed_value(comment, "like_count", likes)

        if comment.user_id != viewer_id:
            content = NotificationTemplates.comment_liked(
                liker.name, truncate_excerpt(comment.content), comment.project_id
            )
            await self.notifications.notify_payload(content.for_user(comment.user_id))
        return True, likes
