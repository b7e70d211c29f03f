"""
Like Repository

Lookups for project and comment likes. Inserts go through the inherited
create(); uniqueness is enforced by the table constraints.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.models.like import Like
from src.shared.repositories.base import BaseRepository


class LikeRepository(BaseRepository[Like]):
    """Repository for Like database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Like, session)

    async def get_project_like(self, user_id: str, project_id: UUID) -> Optional[Like]:
        result = await self.session.execute(
            select(Like).where(Like.user_id == user_id, Like.project_id == project_id)
        )
        return result.scalar_one_or_none()

    async def get_comment_like(self, user_id: str, comment_id: UUID) -> Optional[Like]:
        result = await self.session.execute(
            select(Like).where(Like.user_id == user_id, Like.comment_id == comment_id)
        )
        return result.scalar_one_or_none()
