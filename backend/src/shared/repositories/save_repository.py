"""
Save Repository

Bookmarked projects.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.models.save import Save
from src.shared.repositories.base import BaseRepository


class SaveRepository(BaseRepository[Save]):
    """Repository for Save database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Save, session)

    async def get_pair(self, user_id: str, project_id: UUID) -> Optional[Save]:
        result = await self.session.execute(
            select(Save).where(Save.user_id == user_id, Save.project_id == project_id)
        )
        return result.scalar_one_or_none()
