"""
Collection Repository

Collections and their project entries.

Common Operations:
==================
- list_for_user()          → Owner view (private included) or visitor view
- latest_cover()           → Cover of the most recently added project
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.functions import count as sql_count

from src.shared.models.collection import Collection, CollectionProject
from src.shared.models.project import Project
from src.shared.repositories.base import BaseRepository


class CollectionRepository(BaseRepository[Collection]):
    """Repository for Collection database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Collection, session)

    async def list_for_user(self, user_id: str, include_private: bool) -> list[Collection]:
        """A user's collections, most recently updated first."""
        query = select(Collection).where(Collection.user_id == user_id)
        if not include_private:
            query = query.where(Collection.is_public.is_(True))
        result = await self.session.execute(query.order_by(Collection.updated_at.desc()))
        return list(result.scalars().all())

    # ═══════════════════════════════════════════════════════════════════════════
    # ENTRIES
    # ═══════════════════════════════════════════════════════════════════════════

    async def add_entry(self, collection_id: UUID, project_id: UUID) -> CollectionProject:
        """
        Insert a junction row.

        Raises:
            IntegrityError: project already in the collection
        """
        entry = CollectionProject(collection_id=collection_id, project_id=project_id)
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def remove_entry(self, collection_id: UUID, project_id: UUID) -> bool:
        result = await self.session.execute(
            delete(CollectionProject).where(
                CollectionProject.collection_id == collection_id,
                CollectionProject.project_id == project_id,
            )
        )
        return result.rowcount > 0

    async def count_entries(self, collection_id: UUID) -> int:
        result = await self.session.execute(
            select(sql_count(CollectionProject.id)).where(
                CollectionProject.collection_id == collection_id
            )
        )
        return result.scalar() or 0

    async def latest_cover(self, collection_id: UUID) -> Optional[str]:
        """First slide of the most recently added project, if any."""
        result = await self.session.execute(
            select(Project.slide_urls)
            .join(CollectionProject, CollectionProject.project_id == Project.id)
            .where(CollectionProject.collection_id == collection_id)
            .order_by(CollectionProject.added_at.desc())
            .limit(1)
        )
        slides = result.scalar_one_or_none()
        return slides[0] if slides else None
