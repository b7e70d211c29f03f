"""
Project Repository

Database operations for projects, including the single-statement feed
fetch behind every discover / feed / search / profile listing.

Feed Row Query:
===============
    SELECT p.id, p.title, p.description, p.slide_urls, p.tags, p.created_at,
           u.id, u.username, u.display_name, u.avatar_url,
           (SELECT count(*) FROM likes    WHERE project_id = p.id) AS like_total,
           (SELECT count(*) FROM comments WHERE project_id = p.id) AS comment_total,
           EXISTS (SELECT 1 FROM likes
                   WHERE project_id = p.id AND user_id = :viewer)  AS is_liked   -- viewer only
    FROM projects p JOIN users u ON u.id = p.user_id
    WHERE <filters>
    ORDER BY <sort>
    LIMIT :limit OFFSET :offset

One round trip whatever the page size. Follow state for the page owners is
fetched separately by FollowRepository.get_followed_ids().

Tag Membership:
===============
Tags are a JSON array. Membership is an EXISTS over the array expanded as a
table: jsonb_array_elements_text() on PostgreSQL, json_each() on SQLite.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence
from uuid import UUID

from sqlalchemy import Row, exists, false, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.functions import count as sql_count

from src.shared.models.collection import CollectionProject
from src.shared.models.comment import Comment
from src.shared.models.enums import FeedSort
from src.shared.models.like import Like
from src.shared.models.project import Project
from src.shared.models.save import Save
from src.shared.models.user import User
from src.shared.repositories.base import LIKE_ESCAPE, BaseRepository


@dataclass
class ProjectFilter:
    """
    Filter descriptor for project listings.

    Attributes:
        is_public: Visibility to require, None for any
        tag: Exact tag the project must carry
        owner_ids: Restrict to these owners (empty means no results)
        owner_id: Restrict to a single owner
        text: Case-insensitive match on title, description or a tag
        saved_by: Restrict to projects this user saved
        collection_id: Restrict to projects in this collection
        project_id: A single project (detail pages)
    """

    is_public: Optional[bool] = True
    tag: Optional[str] = None
    owner_ids: Optional[Sequence[str]] = None
    owner_id: Optional[str] = None
    text: Optional[str] = None
    saved_by: Optional[str] = None
    collection_id: Optional[UUID] = None
    project_id: Optional[UUID] = None


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Project, session)

    # ═══════════════════════════════════════════════════════════════════════════
    # FILTERING
    # ═══════════════════════════════════════════════════════════════════════════

    def _tag_elements(self):
        """Project.tags expanded to a one-column table named value."""
        if self.dialect_name == "postgresql":
            return func.jsonb_array_elements_text(Project.tags).table_valued("value")
        return func.json_each(Project.tags).table_valued("value")

    def _tag_clause(self, tag: str):
        elements = self._tag_elements()
        return select(1).select_from(elements).where(elements.c.value == tag).exists()

    def _tag_contains_clause(self, text: str):
        elements = self._tag_elements()
        return (
            select(1)
            .select_from(elements)
            .where(
                func.lower(elements.c.value).like(
                    self.contains_pattern(text.lower()), escape=LIKE_ESCAPE
                )
            )
            .exists()
        )

    def _apply_filters(self, query, filters: ProjectFilter):
        if filters.is_public is not None:
            query = query.where(Project.is_public == filters.is_public)
        if filters.owner_ids is not None:
            if not filters.owner_ids:
                return query.where(false())
            query = query.where(Project.user_id.in_(list(filters.owner_ids)))
        if filters.project_id is not None:
            query = query.where(Project.id == filters.project_id)
        if filters.owner_id is not None:
            query = query.where(Project.user_id == filters.owner_id)
        if filters.saved_by is not None:
            query = query.where(
                Project.id.in_(select(Save.project_id).where(Save.user_id == filters.saved_by))
            )
        if filters.collection_id is not None:
            query = query.where(
                Project.id.in_(
                    select(CollectionProject.project_id).where(
                        CollectionProject.collection_id == filters.collection_id
                    )
                )
            )
        if filters.tag:
            query = query.where(self._tag_clause(filters.tag))
        if filters.text:
            pattern = self.contains_pattern(filters.text)
            query = query.where(
                or_(
                    Project.title.ilike(pattern, escape=LIKE_ESCAPE),
                    Project.description.ilike(pattern, escape=LIKE_ESCAPE),
                    self._tag_contains_clause(filters.text),
                )
            )
        return query

    @staticmethod
    def _order_by(sort: FeedSort):
        if sort in (FeedSort.POPULAR, FeedSort.LIKES):
            return Project.like_count.desc()
        return Project.created_at.desc()

    # ═══════════════════════════════════════════════════════════════════════════
    # FEED QUERIES
    # ═══════════════════════════════════════════════════════════════════════════

    async def fetch_feed_rows(
        self,
        filters: ProjectFilter,
        sort: FeedSort,
        limit: int,
        offset: int,
        viewer_id: Optional[str] = None,
    ) -> Sequence[Row[Any]]:
        """
        Fetch one page of projects with owner summary and counts.

        The is_liked column is only selected when a viewer is given.

        Returns:
            Rows with attributes id, title, description, slide_urls, tags,
            created_at, owner_id, owner_username, owner_display_name,
            owner_avatar_url, like_total, comment_total and (viewer only)
            is_liked
        """
        like_total = (
            select(sql_count(Like.id))
            .where(Like.project_id == Project.id)
            .correlate(Project)
            .scalar_subquery()
            .label("like_total")
        )
        comment_total = (
            select(sql_count(Comment.id))
            .where(Comment.project_id == Project.id)
            .correlate(Project)
            .scalar_subquery()
            .label("comment_total")
        )

        columns = [
            Project.id,
            Project.title,
            Project.description,
            Project.slide_urls,
            Project.tags,
            Project.created_at,
            User.id.label("owner_id"),
            User.username.label("owner_username"),
            User.display_name.label("owner_display_name"),
            User.avatar_url.label("owner_avatar_url"),
            like_total,
            comment_total,
        ]
        if viewer_id is not None:
            columns.append(
                exists()
                .where(Like.project_id == Project.id, Like.user_id == viewer_id)
                .correlate(Project)
                .label("is_liked")
            )

        query = select(*columns).join(User, User.id == Project.user_id)
        query = self._apply_filters(query, filters)
        query = query.order_by(self._order_by(sort)).limit(limit).offset(offset)

        result = await self.session.execute(query)
        return result.all()

    async def count_projects(self, filters: ProjectFilter) -> int:
        """Total number of projects matching filters (pagination)."""
        query = self._apply_filters(select(sql_count(Project.id)), filters)
        result = await self.session.execute(query)
        return result.scalar() or 0

    # ═══════════════════════════════════════════════════════════════════════════
    # COUNTERS
    # ═══════════════════════════════════════════════════════════════════════════

    async def adjust_like_count(self, project_id: UUID, delta: int) -> int:
        """
        Atomically add delta to like_count (floored at zero).

        Returns:
            The new like_count
        """
        result = await self.session.execute(
            update(Project)
            .where(Project.id == project_id)
            .values(like_count=self.floor_zero(Project.like_count + delta))
            .returning(Project.like_count)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one()

    async def increment_view_count(self, project_id: UUID) -> int:
        """Atomically add one view, return the new view_count."""
        result = await self.session.execute(
            update(Project)
            .where(Project.id == project_id)
            .values(view_count=Project.view_count + 1)
            .returning(Project.view_count)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one()

    # ═══════════════════════════════════════════════════════════════════════════
    # STATS
    # ═══════════════════════════════════════════════════════════════════════════

    async def owner_stats(self, owner_id: str) -> tuple[int, int]:
        """
        Count an owner's projects and the likes they received.

        Returns:
            (project_count, total_likes)
        """
        result = await self.session.execute(
            select(
                sql_count(Project.id),
                func.coalesce(func.sum(Project.like_count), 0),
            ).where(Project.user_id == owner_id)
        )
        projects, likes = result.one()
        return int(projects or 0), int(likes or 0)
