"""
Comment Repository

Database operations for comments, including the two statements behind the
threaded comment listing:

    1. fetch_top_level_rows(): one page of top-level comments, newest first
    2. fetch_reply_rows():     every reply of that page, oldest first

Both select the author summary, a correlated like count and, with a viewer,
an EXISTS flag for the viewer's like. Top-level rows also carry their reply
count.
"""

from typing import Any, Optional, Sequence
from uuid import UUID

from sqlalchemy import Row, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlalchemy.sql.functions import count as sql_count

from src.shared.models.comment import Comment
from src.shared.models.like import Like
from src.shared.models.user import User
from src.shared.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    """Repository for Comment database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Comment, session)

    def _row_columns(self, viewer_id: Optional[str], with_reply_total: bool) -> list:
        like_total = (
            select(sql_count(Like.id))
            .where(Like.comment_id == Comment.id)
            .correlate(Comment)
            .scalar_subquery()
            .label("like_total")
        )
        columns = [
            Comment.id,
            Comment.project_id,
            Comment.parent_id,
            Comment.content,
            Comment.tags,
            Comment.created_at,
            Comment.updated_at,
            User.id.label("author_id"),
            User.username.label("author_username"),
            User.display_name.label("author_display_name"),
            User.avatar_url.label("author_avatar_url"),
            like_total,
        ]
        if with_reply_total:
            reply = aliased(Comment)
            columns.append(
                select(sql_count(reply.id))
                .where(reply.parent_id == Comment.id)
                .correlate(Comment)
                .scalar_subquery()
                .label("reply_total")
            )
        if viewer_id is not None:
            columns.append(
                exists()
                .where(Like.comment_id == Comment.id, Like.user_id == viewer_id)
                .correlate(Comment)
                .label("is_liked")
            )
        return columns

    async def fetch_top_level_rows(
        self,
        project_id: UUID,
        viewer_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Sequence[Row[Any]]:
        """One page of top-level comments on a project, newest first."""
        query = (
            select(*self._row_columns(viewer_id, with_reply_total=True))
            .join(User, User.id == Comment.user_id)
            .where(Comment.project_id == project_id, Comment.parent_id.is_(None))
            .order_by(Comment.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(query)
        return result.all()

    async def fetch_reply_rows(
        self,
        parent_ids: Sequence[UUID],
        viewer_id: Optional[str] = None,
    ) -> Sequence[Row[Any]]:
        """All replies to the given comments, oldest first."""
        if not parent_ids:
            return []
        query = (
            select(*self._row_columns(viewer_id, with_reply_total=False))
            .join(User, User.id == Comment.user_id)
            .where(Comment.parent_id.in_(list(parent_ids)))
            .order_by(Comment.created_at.asc())
        )
        result = await self.session.execute(query)
        return result.all()

    async def count_top_level(self, project_id: UUID) -> int:
        result = await self.session.execute(
            select(sql_count(Comment.id)).where(
                Comment.project_id == project_id, Comment.parent_id.is_(None)
            )
        )
        return result.scalar() or 0

    async def adjust_like_count(self, comment_id: UUID, delta: int) -> int:
        """Atomically add delta to like_count (floored at zero), return it."""
        result = await self.session.execute(
            update(Comment)
            .where(Comment.id == comment_id)
            .values(like_count=self.floor_zero(Comment.like_count + delta))
            .returning(Comment.like_count)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one()
