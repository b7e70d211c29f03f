"""
Comment Service

Business logic for threaded comments.

Threading:
==========
Comments are at most two levels deep. A reply names its parent; when the
parent is itself a reply, the new comment is attached to the parent's root
so the thread stays flat:

    comment A
      ├── reply B          (parent_id = A)
      └── reply C to B     (stored with parent_id = A)

Notifications:
==============
    reply        → author of the parent comment   (COMMENT_REPLY)
    top-level    → project owner                   (PROJECT_COMMENT)
    @username    → each mentioned user             (MENTION, one batch)

The author is never notified, and a user already notified as parent author
or project owner is not notified again for a mention in the same comment.
"""

import re
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.core.exceptions import (
    AuthorizationError,
    CommentNotFoundError,
    ProjectNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from src.shared.core.logging import get_logger
from src.shared.models.comment import Comment
from src.shared.models.project import Project
from src.shared.models.user import User
from src.shared.repositories.comment_repository import CommentRepository
from src.shared.repositories.project_repository import ProjectRepository
from src.shared.repositories.user_repository import UserRepository
from src.shared.schemas.comment import (
    CommentItem,
    CommentListResponse,
    CreateCommentRequest,
    UpdateCommentRequest,
)
from src.shared.schemas.project import UserSummary
from src.shared.services.cache_service import PROJECT_ACTIVITY_TAGS, CacheService, CacheTag
from src.shared.services.comment_query_service import CommentQueryService
from src.shared.services.notification_service import NotificationService, NotificationTemplates

logger = get_logger(__name__)


MENTION_PATTERN = re.compile(r"@([a-zA-Z0-9._-]+)")


def parse_mentions(text: str) -> list[str]:
    """Usernames mentioned in text, in order of first appearance."""
    return list(dict.fromkeys(MENTION_PATTERN.findall(text)))


class CommentService:
    """Creates, edits, deletes and lists comments."""

    def __init__(self, session: AsyncSession, cache: Optional[CacheService] = None) -> None:
        self.session = session
        self.cache = cache
        self.comment_repo = CommentRepository(session)
        self.project_repo = ProjectRepository(session)
        self.user_repo = UserRepository(session)
        self.query = CommentQueryService(session)
        self.notifications = NotificationService(session)

    async def _invalidate(self) -> None:
        if self.cache is not None:
            await self.cache.invalidate_related([CacheTag.COMMENTS, *PROJECT_ACTIVITY_TAGS])

    async def _visible_project(self, project_id: UUID, viewer_id: Optional[str]) -> Project:
        project = await self.project_repo.get(project_id)
        if project is None or (not project.is_public and project.user_id != viewer_id):
            raise ProjectNotFoundError(str(project_id))
        return project

    async def _owned_comment(self, viewer_id: str, comment_id: UUID) -> Comment:
        comment = await self.comment_repo.get(comment_id)
        if comment is None:
            raise CommentNotFoundError(str(comment_id))
        if comment.user_id != viewer_id:
            raise AuthorizationError("Only the author can change this comment")
        return comment

    @staticmethod
    def _to_item(comment: Comment, author: User) -> CommentItem:
        return CommentItem(
            id=comment.id,
            content=comment.content,
            tags=list(comment.tags or []),
            project_id=comment.project_id,
            parent_id=comment.parent_id,
            likes=comment.like_count,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            user=UserSummary(
                id=author.id,
                username=author.username,
                name=author.name,
                avatar=author.avatar_url,
            ),
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # READ
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_comments(
        self,
        project_id: UUID,
        viewer_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> CommentListResponse:
        await self._visible_project(project_id, viewer_id)
        comments = await self.query.query_comments(project_id, viewer_id, limit, offset)
        total = await self.query.count_comments(project_id)
        return CommentListResponse(
            comments=comments,
            total=total,
            has_more=offset + limit < total,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # WRITE
    # ═══════════════════════════════════════════════════════════════════════════

    async def create_comment(self, author_id: str, request: CreateCommentRequest) -> CommentItem:
        """
        Post a comment or a reply.

        Raises:
            ValidationError: Blank content, or parent on another project
            CommentNotFoundError: Unknown parent
            ProjectNotFoundError: Unknown or hidden project
        """
        content = request.content.strip()
        if not content:
            raise ValidationError("Comment content is required")

        author = await self.user_repo.get(author_id)
        if author is None:
            raise UserNotFoundError(author_id)

        parent: Optional[Comment] = None
        project_id = request.project_id
        if request.parent_id is not None:
            parent = await self.comment_repo.get(request.parent_id)
            if parent is None:
                raise CommentNotFoundError(str(request.parent_id))
            if project_id is not None and parent.project_id != project_id:
                raise ValidationError("Parent comment belongs to another project")
            project_id = parent.project_id
            if parent.parent_id is not None:
                root = await self.comment_repo.get(parent.parent_id)
                if root is not None:
                    parent = root

        project = await self._visible_project(project_id, author_id)

        comment = await self.comment_repo.create(
            project_id=project.id,
            user_id=author_id,
            parent_id=parent.id if parent is not None else None,
            content=content,
            tags=list(request.tags),
        )

        await self._notify_for_comment(comment, author, project, parent)
        await self._invalidate()
        logger.info(
            "Comment created",
            comment_id=str(comment.id),
            project_id=str(project.id),
            is_reply=parent is not None,
        )
        return self._to_item(comment, author)

    async def _notify_for_comment(
        self,
        comment: Comment,
        author: User,
        project: Project,
        parent: Optional[Comment],
    ) -> None:
        notified = {author.id}

        if parent is not None:
            if parent.user_id not in notified:
                content = NotificationTemplates.comment_reply(author.name, project.title, project.id)
                await self.notifications.notify_payload(content.for_user(parent.user_id))
                notified.add(parent.user_id)
        elif project.user_id not in notified:
            content = NotificationTemplates.project_commented(author.name, project.title, project.id)
            await self.notifications.notify_payload(content.for_user(project.user_id))
            notified.add(project.user_id)

        usernames = parse_mentions(comment.content)
        if not usernames:
            return

        mention = NotificationTemplates.mention(author.name, project.title, project.id)
        mentioned = await self.user_repo.get_by_usernames(usernames)
        payloads = [mention.for_user(user.id) for user in mentioned if user.id not in notified]
        await self.notifications.notify_batch(payloads)

    async def update_comment(
        self,
        viewer_id: str,
        comment_id: UUID,
        request: UpdateCommentRequest,
    ) -> CommentItem:
        """Edit content (and optionally tags). Author only."""
        comment = await self._owned_comment(viewer_id, comment_id)
        content = request.content.strip()
        if not content:
            raise ValidationError("Comment content is required")

        comment.content = content
        if request.tags is not None:
            comment.tags = list(request.tags)
        await self.session.flush()
        await self.session.refresh(comment)

        author = await self.user_repo.get(viewer_id)
        await self._invalidate()
        return self._to_item(comment, author)

    async def delete_comment(self, viewer_id: str, comment_id: UUID) -> None:
        """Delete a comment with its replies and likes. Author only."""
        await self._owned_comment(viewer_id, comment_id)
        await self.comment_repo.delete(comment_id)
        await self._invalidate()
        logger.info("Comment deleted", comment_id=str(comment_id))
