"""
User Repository

Database operations specific to the User model.

Common Operations:
==================
- get_by_username()     → Profile lookup
- get_by_usernames()    → Resolve @mentions in one query
- search()              → Case-insensitive username / name / bio match
- suggest()             → Mention autocomplete
- upsert_profile()      → Create or refresh the local profile row
"""

from typing import Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.functions import count as sql_count

from src.shared.models.user import User
from src.shared.repositories.base import LIKE_ESCAPE, BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(User, session)

    # ═══════════════════════════════════════════════════════════════════════════
    # LOOKUP METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by exact username."""
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_usernames(self, usernames: Sequence[str]) -> list[User]:
        """Resolve a set of usernames; unknown names are skipped."""
        if not usernames:
            return []
        result = await self.session.execute(select(User).where(User.username.in_(usernames)))
        return list(result.scalars().all())

    async def username_exists(self, username: str, exclude_id: Optional[str] = None) -> bool:
        """Check whether a username is taken by someone other than exclude_id."""
        query = select(sql_count()).select_from(User).where(User.username == username)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        result = await self.session.execute(query)
        return (result.scalar() or 0) > 0

    # ═══════════════════════════════════════════════════════════════════════════
    # SEARCH
    # ═══════════════════════════════════════════════════════════════════════════

    def _search_clause(self, text: str):
        pattern = self.contains_pattern(text)
        return or_(
            User.username.ilike(pattern, escape=LIKE_ESCAPE),
            User.display_name.ilike(pattern, escape=LIKE_ESCAPE),
            User.bio.ilike(pattern, escape=LIKE_ESCAPE),
        )

    async def search(self, text: str, limit: int = 10, offset: int = 0) -> list[User]:
        """
        Search users by username, display name or bio.

        Newest accounts first.
        """
        result = await self.session.execute(
            select(User)
            .where(self._search_clause(text))
            .order_by(User.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_search(self, text: str) -> int:
        result = await self.session.execute(
            select(sql_count()).select_from(User).where(self._search_clause(text))
        )
        return result.scalar() or 0

    async def suggest(
        self,
        partial: str,
        limit: int = 5,
        exclude_ids: Sequence[str] = (),
    ) -> list[User]:
        """
        Mention autocomplete: username or display name containing partial.

        Ordered alphabetically by username.
        """
        pattern = self.contains_pattern(partial)
        query = select(User).where(
            or_(
                User.username.ilike(pattern, escape=LIKE_ESCAPE),
                User.display_name.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
        if exclude_ids:
            query = query.where(User.id.not_in(list(exclude_ids)))
        result = await self.session.execute(query.order_by(User.username.asc()).limit(limit))
        return list(result.scalars().all())

    # ═══════════════════════════════════════════════════════════════════════════
    # WRITE METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    async def upsert_profile(
        self,
        user_id: str,
        username: str,
        display_name: Optional[str] = None,
        avatar_url: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> User:
        """
        Create the profile row for an identity, or update the existing one.

        Raises:
            IntegrityError: username already taken by another user
        """
        user = await self.get(user_id)
        if user is None:
            return await self.create(
                id=user_id,
                username=username,
                display_name=display_name,
                avatar_url=avatar_url,
                bio=bio,
            )

        user.username = username
        user.display_name = display_name
        user.avatar_url = avatar_url
        user.bio = bio
        await self.session.flush()
        await self.session.refresh(user)
        return user
