"""
Comment Query Service

Threaded comment listing for a project in two statements:

    1. a page of top-level comments, newest first
    2. every reply of that page, oldest first (conversation order)

Each comment and reply carries the author summary, its like count and the
viewer's isLiked flag (false for anonymous viewers).
"""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.repositories.comment_repository import CommentRepository
from src.shared.schemas.comment import CommentItem
from src.shared.schemas.project import UserSummary


class CommentQueryService:
    """Aggregated comment listing."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.comment_repo = CommentRepository(session)

    async def query_comments(
        self,
        project_id: UUID,
        viewer_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[CommentItem]:
        """
        Fetch a page of top-level comments with their replies nested.

        Returns:
            CommentItem list, newest top-level comment first
        """
        top_rows = await self.comment_repo.fetch_top_level_rows(
            project_id, viewer_id, limit, offset
        )
        if not top_rows:
            return []

        reply_rows = await self.comment_repo.fetch_reply_rows(
            [row.id for row in top_rows], viewer_id
        )

        replies_by_parent: dict[UUID, list[CommentItem]] = {}
        for row in reply_rows:
            replies_by_parent.setdefault(row.parent_id, []).append(
                self._to_item(row, viewer_id)
            )

        items = []
        for row in top_rows:
            item = self._to_item(row, viewer_id)
            item.replies = replies_by_parent.get(row.id, [])
            item.reply_count = row.reply_total or 0
            items.append(item)
        return items

    async def count_comments(self, project_id: UUID) -> int:
        """Number of top-level comments (pagination)."""
        return await self.comment_repo.count_top_level(project_id)

    @staticmethod
    def _to_item(row: Any, viewer_id: Optional[str]) -> CommentItem:
        return CommentItem(
            id=row.id,
            content=row.content,
            tags=list(row.tags or []),
            project_id=row.project_id,
            parent_id=row.parent_id,
            likes=row.like_total or 0,
            created_at=row.created_at,
            updated_at=row.updated_at,
            is_liked=bool(row.is_liked) if viewer_id is not None else False,
            user=UserSummary(
                id=row.author_id,
                username=row.author_username,
                name=row.author_display_name or row.author_username,
                avatar=row.author_avatar_url,
            ),
        )
