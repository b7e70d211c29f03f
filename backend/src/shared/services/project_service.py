"""
Project Service

Business logic for publishing, viewing and listing projects.

Listings:
=========
    discover_projects()   public projects, cached per viewer (MEDIUM TTL)
    following_feed()      public projects of the users the viewer follows
    saved_projects()      public projects the viewer saved
    search()              public projects + users matching a text

Every listing goes through ProjectQueryService so the page is hydrated in
a bounded number of statements, and every listing answers with the same
ProjectFeedPage shape.

Caching:
========
Only discover is cached. Its key carries the page window, sort, tag and
the viewer id (or "anonymous"), so one viewer's isLiked / isFollowing flags
are never served to another:

    discover:projects:limit=12&page=1&sort=recent&viewer=user_2a

Writes that change what a listing shows invalidate the discover / feed /
search tags.

Usage:
======
    service = ProjectService(db, cache)
    page = await service.discover_projects(viewer_id, page=1, limit=12)
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from src.config.settings import settings
from src.shared.core.exceptions import (
    AuthorizationError,
    ProjectNotFoundError,
    UserNotFoundError,
)
from src.shared.core.logging import get_logger
from src.shared.models.enums import FeedSort
from src.shared.models.project import Project
from src.shared.repositories.follow_repository import FollowRepository
from src.shared.repositories.project_repository import ProjectFilter, ProjectRepository
from src.shared.repositories.save_repository import SaveRepository
from src.shared.repositories.user_repository import UserRepository
from src.shared.schemas.project import CreateProjectRequest, ProjectDetail, ProjectFeedPage
from src.shared.schemas.user import SearchResponse, UserSearchItem
from src.shared.services.cache_service import (
    PROJECT_ACTIVITY_TAGS,
    CachePolicy,
    CacheService,
    generate_cache_key,
)
from src.shared.services.project_query_service import ProjectQueryService

logger = get_logger(__name__)


DISCOVER_CACHE_PREFIX = "discover:projects"
ANONYMOUS_VIEWER = "anonymous"


class SearchType:
    """What a search covers."""

    ALL = "all"
    PROJECTS = "projects"
    USERS = "users"

    @classmethod
    def parse(cls, value: Optional[str]) -> str:
        return value if value in (cls.PROJECTS, cls.USERS) else cls.ALL


class ProjectService:
    """
    Service for project business logic.

    Handles:
    - Publishing and deleting projects
    - Project detail pages with view counting
    - Discover, following, saved and search listings
    """

    def __init__(self, session: AsyncSession, cache: Optional[CacheService] = None) -> None:
        self.session = session
        self.cache = cache
        self.project_repo = ProjectRepository(session)
        self.user_repo = UserRepository(session)
        self.follow_repo = FollowRepository(session)
        self.save_repo = SaveRepository(session)
        self.query = ProjectQueryService(session)

    async def _invalidate_listings(self) -> None:
        if self.cache is not None:
            await self.cache.invalidate_related(PROJECT_ACTIVITY_TAGS)

    async def _page(
        self,
        filters: ProjectFilter,
        sort: FeedSort,
        page: int,
        limit: int,
        viewer_id: Optional[str],
    ) -> ProjectFeedPage:
        offset = (page - 1) * limit
        projects = await self.query.query_projects(filters, sort, limit, offset, viewer_id)
        total = await self.query.count_projects(filters)
        return ProjectFeedPage(
            projects=projects,
            has_more=offset + limit < total,
            total=total,
            page=page,
            limit=limit,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # WRITE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def create_project(self, owner_id: str, request: CreateProjectRequest) -> ProjectDetail:
        """
        Publish a project from already-uploaded slide URLs.

        Raises:
            UserNotFoundError: The owner has no profile yet
        """
        if not await self.user_repo.exists(owner_id):
            raise UserNotFoundError(owner_id)

        project = await self.project_repo.create(
            user_id=owner_id,
            title=request.title,
            description=request.description,
            slide_urls=list(request.slide_urls),
            tags=list(request.tags),
            is_public=request.is_public,
        )
        await self._invalidate_listings()
        logger.info("Project created", project_id=str(project.id), owner_id=owner_id)
        return await self._detail(project, owner_id)

    async def delete_project(self, viewer_id: str, project_id: UUID) -> None:
        """
        Delete a project and, through cascades, its likes, comments and saves.

        Raises:
            ProjectNotFoundError: Unknown project
            AuthorizationError: The viewer does not own it
        """
        project = await self.project_repo.get(project_id)
        if project is None:
            raise ProjectNotFoundError(str(project_id))
        if project.user_id != viewer_id:
            raise AuthorizationError("Only the owner can delete this project")

        await self.project_repo.delete(project_id)
        await self._invalidate_listings()
        logger.info("Project deleted", project_id=str(project_id), owner_id=viewer_id)

    # ═══════════════════════════════════════════════════════════════════════════
    # DETAIL
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_project(self, project_id: UUID, viewer_id: Optional[str] = None) -> ProjectDetail:
        """
        Project page. Counts one view per call.

        Private projects are only visible to their owner; everyone else gets
        the same 404 as for a missing project.
        """
        project = await self.project_repo.get(project_id)
        if project is None or (not project.is_public and project.user_id != viewer_id):
            raise ProjectNotFoundError(str(project_id))

        views = await self.project_repo.increment_view_count(project_id)
        set_committed_value(project, "view_count", views)
        return await self._detail(project, viewer_id)

    async def _detail(self, project: Project, viewer_id: Optional[str]) -> ProjectDetail:
        items = await self.query.query_projects(
            ProjectFilter(is_public=None, project_id=project.id),
            limit=1,
            viewer_id=viewer_id,
        )
        if not items:
            raise ProjectNotFoundError(str(project.id))

        is_saved = False
        if viewer_id is not None:
            is_saved = await self.save_repo.get_pair(viewer_id, project.id) is not None

        # The detail page shows every slide, not the feed preview
        data = items[0].model_dump()
        data.update(
            images=list(project.slide_urls or []),
            views=project.view_count,
            is_public=project.is_public,
            is_saved=is_saved,
            is_owner=project.user_id == viewer_id,
            updated_at=project.updated_at,
        )
        return ProjectDetail(**data)

    # ═══════════════════════════════════════════════════════════════════════════
    # LISTINGS
    # ═══════════════════════════════════════════════════════════════════════════

    async def discover_projects(
        self,
        viewer_id: Optional[str] = None,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        sort: FeedSort | str = FeedSort.RECENT,
        tag: Optional[str] = None,
    ) -> ProjectFeedPage:
        """Public projects, newest or most liked first, optionally by tag."""
        sort = FeedSort.parse(sort)
        tag = tag.strip() if tag and tag.strip() else None

        async def produce() -> dict:
            result = await self._page(ProjectFilter(tag=tag), sort, page, limit, viewer_id)
            return result.model_dump(mode="json", by_alias=True)

        if self.cache is None:
            return ProjectFeedPage.model_validate(await produce())

        key = generate_cache_key(
            DISCOVER_CACHE_PREFIX,
            {
                "page": page,
                "limit": limit,
                "sort": sort.value,
                "tag": tag,
                "viewer": viewer_id or ANONYMOUS_VIEWER,
            },
        )
        payload = await self.cache.cached(key, produce, ttl_ms=CachePolicy.MEDIUM)
        return ProjectFeedPage.model_validate(payload)

    async def following_feed(
        self,
        viewer_id: str,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
    ) -> ProjectFeedPage:
        """Public projects of followed users, newest first. Empty when following nobody."""
        following_ids = await self.follow_repo.get_following_ids(viewer_id)
        if not following_ids:
            return ProjectFeedPage(projects=[], has_more=False, total=0, page=page, limit=limit)

        return await self._page(
            ProjectFilter(owner_ids=following_ids), FeedSort.RECENT, page, limit, viewer_id
        )

    async def saved_projects(
        self,
        viewer_id: str,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
    ) -> ProjectFeedPage:
        return await self._page(
            ProjectFilter(saved_by=viewer_id), FeedSort.RECENT, page, limit, viewer_id
        )

    async def search(
        self,
        text: Optional[str],
        viewer_id: Optional[str] = None,
        search_type: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> SearchResponse:
        """
        Search public projects (most liked first) and users (newest first).

        A blank query returns an empty result without touching the database.
        """
        text = (text or "").strip()
        if not text:
            return SearchResponse(projects=[], users=[], total=0, has_more=False)

        search_type = SearchType.parse(search_type)
        offset = (page - 1) * limit
        total = 0

        projects = []
        if search_type in (SearchType.ALL, SearchType.PROJECTS):
            filters = ProjectFilter(text=text)
            projects = await self.query.query_projects(
                filters, FeedSort.POPULAR, limit, offset, viewer_id
            )
            total += await self.query.count_projects(filters)

        users: list[UserSearchItem] = []
        if search_type in (SearchType.ALL, SearchType.USERS):
            found = await self.user_repo.search(text, limit, offset)
            total += await self.user_repo.count_search(text)

            followed: set[str] = set()
            if viewer_id is not None and found:
                followed = await self.follow_repo.get_followed_ids(
                    viewer_id, [user.id for user in found]
                )
            users = [
                UserSearchItem(
                    id=user.id,
                    username=user.username,
                    name=user.name,
                    avatar=user.avatar_url,
                    bio=user.bio,
                    is_following=user.id in followed,
                )
                for user in found
            ]

        return SearchResponse(
            projects=projects,
            users=users,
            total=total,
            has_more=offset + limit < total,
        )
