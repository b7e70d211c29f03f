"""
Notification Repository

Storage for notifications. Writes here are always called from inside a
SAVEPOINT by NotificationService, which owns the failure handling.
"""

from datetime import datetime
from typing import Any, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.functions import count as sql_count

from src.shared.models.notification import Notification
from src.shared.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Notification, session)

    async def bulk_create(self, rows: Sequence[dict[str, Any]]) -> int:
        """
        Insert many notifications in one executemany statement.

        Returns:
            Number of rows inserted
        """
        if not rows:
            return 0
        await self.session.execute(insert(Notification), list(rows))
        return len(rows)

    async def list_for_user(
        self,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
    ) -> list[Notification]:
        """A recipient's notifications, newest first."""
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        result = await self.session.execute(
            query.order_by(Notification.created_at.desc()).limit(limit).offset(offset)
        )
        return list(result.scalars().all())

    async def count_unread(self, user_id: str) -> int:
        result = await self.session.execute(
            select(sql_count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )
        return result.scalar() or 0

    async def mark_read(self, user_id: str, ids: Optional[Sequence[UUID]] = None) -> int:
        """
        Mark notifications read. ids=None marks every unread one.

        Only the recipient's own rows are touched.
        """
        query = update(Notification).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
        if ids is not None:
            if not ids:
                return 0
            query = query.where(Notification.id.in_(list(ids)))
        result = await self.session.execute(
            query.values(is_read=True).execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_read_before(self, cutoff: datetime) -> int:
        """Delete read notifications created before cutoff."""
        result = await self.session.execute(
            delete(Notification).where(
                Notification.is_read.is_(True),
                Notification.created_at < cutoff,
            ).execution_options(synchronize_session=False)
        )
        return result.rowcount
