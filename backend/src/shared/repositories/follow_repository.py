"""
Follow Repository

Follower graph queries.

Common Operations:
==================
- get_followed_ids()    → Which of a set of users the viewer follows (one query)
- get_following_ids()   → Everyone a user follows (following feed)
- count_followers() / count_following()
"""

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.functions import count as sql_count

from src.shared.models.follow import Follow
from src.shared.repositories.base import BaseRepository


class FollowRepository(BaseRepository[Follow]):
    """Repository for Follow database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Follow, session)

    async def get_pair(self, follower_id: str, following_id: str) -> Optional[Follow]:
        result = await self.session.execute(
            select(Follow).where(
                Follow.follower_id == follower_id,
                Follow.following_id == following_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_followed_ids(
        self,
        follower_id: str,
        candidate_ids: Sequence[str],
    ) -> set[str]:
        """
        Return the subset of candidate_ids that follower_id follows.

        Example:
            followed = await repo.get_followed_ids(viewer_id, ["u1", "u2", "u3"])
            # {"u2"}
        """
        if not candidate_ids:
            return set()
        result = await self.session.execute(
            select(Follow.following_id).where(
                Follow.follower_id == follower_id,
                Follow.following_id.in_(list(set(candidate_ids))),
            )
        )
        return set(result.scalars().all())

    async def get_following_ids(self, follower_id: str) -> list[str]:
        result = await self.session.execute(
            select(Follow.following_id).where(Follow.follower_id == follower_id)
        )
        return list(result.scalars().all())

    async def count_followers(self, user_id: str) -> int:
        result = await self.session.execute(
            select(sql_count(Follow.id)).where(Follow.following_id == user_id)
        )
        return result.scalar() or 0

    async def count_following(self, user_id: str) -> int:
        result = await self.session.execute(
            select(sql_count(Follow.id)).where(Follow.follower_id == user_id)
        )
        return result.scalar() or 0
