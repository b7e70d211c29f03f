"""
Feed Handler

Project listings: discover, following feed, saved projects and search.

    GET /discover   public projects (anonymous allowed), cached per viewer
    GET /feed       projects of followed users (auth)
    GET /saved      projects the caller saved (auth)
    GET /search     projects and users matching q

ARCHITECTURE:
=============
    Handler → ProjectService → ProjectQueryService → Repositories

Handlers only parse the query and pick the viewer; every listing answers
with the same ProjectFeedPage shape.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import CurrentUser, OptionalUser, Pagination
from src.api.dependencies.services import get_project_service
from src.shared.schemas.project import ProjectFeedPage
from src.shared.schemas.user import SearchResponse
from src.shared.services.project_service import ProjectService


router = APIRouter()


@router.get("/discover", response_model=ProjectFeedPage)
async def discover(
    viewer: OptionalUser,
    pagination: Pagination,
    sort: str = Query("recent", description="recent | popular | likes"),
    tag: Optional[str] = Query(None, description="Only projects carrying this tag"),
    project_service: ProjectService = Depends(get_project_service),
):
    """
    Discover public projects.

    Unknown sort values fall back to recent.
    """
    return await project_service.discover_projects(
        viewer_id=viewer["user_id"] if viewer else None,
        page=pagination.page,
        limit=pagination.limit,
        sort=sort,
        tag=tag,
    )


@router.get("/feed", response_model=ProjectFeedPage)
async def following_feed(
    current_user: CurrentUser,
    pagination: Pagination,
    project_service: ProjectService = Depends(get_project_service),
):
    """Newest public projects of the users the caller follows."""
    return await project_service.following_feed(
        current_user["user_id"], page=pagination.page, limit=pagination.limit
    )


@router.get("/saved", response_model=ProjectFeedPage)
async def saved_projects(
    current_user: CurrentUser,
    pagination: Pagination,
    project_service: ProjectService = Depends(get_project_service),
):
    return await project_service.saved_projects(
        current_user["user_id"], page=pagination.page, limit=pagination.limit
    )


@router.get("/search", response_model=SearchResponse)
async def search(
    viewer: OptionalUser,
    q: Optional[str] = Query(None, description="Search text"),
    type: Optional[str] = Query("all", description="all | projects | users"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    project_service: ProjectService = Depends(get_project_service),
):
    """
    Search projects (most liked first) and users (newest first).

    A blank query returns empty results.
    """
    return await project_service.search(
        q,
        viewer_id=viewer["user_id"] if viewer else None,
        search_type=type,
        page=page,
        limit=limit,
    )
