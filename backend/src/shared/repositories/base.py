"""
Base Repository

Generic repository with the CRUD operations every entity repository shares.

What This Provides:
===================
- get(id)        → Fetch single record by primary key
- exists()       → Check if a record exists
- create()       → Insert a record
- delete()       → Hard delete a record

Generic Type Pattern:
=====================
    class ProjectRepository(BaseRepository[Project]):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(Project, session)

    project = await ProjectRepository(db).get(project_id)  # -> Optional[Project]

flush() vs commit():
====================
Repositories only flush. The request-scoped get_db() dependency commits,
and services wrap multi-statement writes in SAVEPOINTs where they must be
atomic on their own.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.functions import count as sql_count

from src.shared.models.base import Base


ModelType = TypeVar("ModelType", bound=Base)

LIKE_ESCAPE = "\\"


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameter:
        ModelType: The SQLAlchemy model class this repository manages

    Attributes:
        model: The SQLAlchemy model class
        session: The async database session
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session

    @property
    def dialect_name(self) -> str:
        """Name of the bound database dialect ("postgresql", "sqlite", ...)."""
        return self.session.get_bind().dialect.name

    def floor_zero(self, expression):
        """GREATEST(expression, 0) in the bound dialect."""
        # SQLite spells GREATEST as the two-argument max()
        if self.dialect_name == "sqlite":
            return func.max(expression, 0)
        return func.greatest(expression, 0)

    @staticmethod
    def contains_pattern(text: str) -> str:
        """
        LIKE pattern matching text anywhere, with % and _ taken literally.

        Pair it with escape=LIKE_ESCAPE on the like()/ilike() call.
        """
        escaped = (
            text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
            .replace("%", LIKE_ESCAPE + "%")
            .replace("_", LIKE_ESCAPE + "_")
        )
        return f"%{escaped}%"

    # ═══════════════════════════════════════════════════════════════════════════
    # READ OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get(self, record_id: Any) -> Optional[ModelType]:
        """
        Get a single record by primary key.

        Returns:
            The model instance if found, None otherwise
        """
        result = await self.session.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def exists(self, record_id: Any) -> bool:
        """Check if a record exists without loading it."""
        result = await self.session.execute(
            select(sql_count()).select_from(self.model).where(self.model.id == record_id)
        )
        return (result.scalar() or 0) > 0

    # ═══════════════════════════════════════════════════════════════════════════
    # WRITE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Insert a new record and flush it.

        Raises:
            IntegrityError: On a unique or check constraint violation
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, record_id: Any) -> bool:
        """
        Hard delete a record by primary key.

        Dependent rows go with it through ON DELETE CASCADE.

        Returns:
            True if deleted, False if not found
        """
        instance = await self.get(record_id)
        if not instance:
            return False

        await self.session.delete(instance)
        await self.session.flush()
        return True
