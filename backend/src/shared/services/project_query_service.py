"""
Project Query Service

Turns a filter + sort + page window + optional viewer into fully hydrated
ProjectFeedItem objects in a bounded number of statements.

QUERY PLAN:
===========
    1. ProjectRepository.fetch_feed_rows()
         page of projects + owner summary + like/comment counts
         (+ viewer like flag when a viewer is given)
    2. FollowRepository.get_followed_ids()
         only with a viewer and a non-empty page: which page owners the
         viewer follows

    → 1 statement anonymous, 2 with a viewer, whatever the page size.

The total count for pagination is a separate count_projects() call made by
the caller. Both run on the request's single AsyncSession, which does not
allow concurrent statements, so callers await them one after the other.

Failures propagate: a failed follow lookup fails the whole call rather than
returning projects with isFollowing defaulted.
"""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.shared.models.enums import FeedSort
from src.shared.repositories.follow_repository import FollowRepository
from src.shared.repositories.project_repository import ProjectFilter, ProjectRepository
from src.shared.schemas.project import FeedUser, ProjectFeedItem


class ProjectQueryService:
    """Aggregated project listing used by every feed endpoint."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.project_repo = ProjectRepository(session)
        self.follow_repo = FollowRepository(session)

    async def query_projects(
        self,
        filters: ProjectFilter,
        sort: FeedSort = FeedSort.RECENT,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        offset: int = 0,
        viewer_id: Optional[str] = None,
    ) -> list[ProjectFeedItem]:
        """
        Fetch one page of project summaries.

        Args:
            filters: Visibility / tag / owner / text filters
            sort: RECENT or POPULAR / LIKES (unknown values already mapped
                to RECENT by FeedSort.parse)
            limit: Page size
            offset: Rows to skip
            viewer_id: Requesting user, None for anonymous

        Returns:
            ProjectFeedItem list in sort order
        """
        rows = await self.project_repo.fetch_feed_rows(
            filters, FeedSort.parse(sort), limit, offset, viewer_id
        )
        if not rows:
            return []

        followed: set[str] = set()
        if viewer_id is not None:
            followed = await self.follow_repo.get_followed_ids(
                viewer_id, [row.owner_id for row in rows]
            )

        return [self._to_item(row, viewer_id, followed) for row in rows]

    async def count_projects(self, filters: ProjectFilter) -> int:
        return await self.project_repo.count_projects(filters)

    @staticmethod
    def _to_item(row: Any, viewer_id: Optional[str], followed: set[str]) -> ProjectFeedItem:
        slides = list(row.slide_urls or [])
        return ProjectFeedItem(
            id=row.id,
            title=row.title,
            description=row.description,
            cover_image=slides[0] if slides else None,
            images=slides[: settings.FEED_SLIDE_LIMIT],
            tags=list(row.tags or []),
            likes=row.like_total or 0,
            comments=row.comment_total or 0,
            created_at=row.created_at,
            is_liked=bool(row.is_liked) if viewer_id is not None else False,
            user=FeedUser(
                id=row.owner_id,
                username=row.owner_username,
                name=row.owner_display_name or row.owner_username,
                avatar=row.owner_avatar_url,
                is_following=row.owner_id in followed,
            ),
        )
